"""
Document parsing for fetched pages.

Wraps BeautifulSoup so every query degrades to None / [] instead of
raising. Extraction code relies on that: a page missing half of its markup
still produces a preview.
"""

from typing import List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from soupsieve import SelectorSyntaxError

from .error_utils import ErrorKind, make_error

PARSER = 'html.parser'


def _clean(value) -> Optional[str]:
    """Strip a string value; empty or non-string values become None."""
    if isinstance(value, list):
        # Multi-valued attributes (class, rel) come back as lists
        value = ' '.join(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class Document:
    """Read-only query interface over a parsed HTML page."""

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    def first(self, selector: str):
        """First element matching a CSS selector, or None."""
        try:
            return self._soup.select_one(selector)
        except SelectorSyntaxError:
            return None

    def all(self, selector: str) -> List:
        """All elements matching a CSS selector in document order."""
        try:
            return self._soup.select(selector)
        except SelectorSyntaxError:
            return []

    def attr(self, selector: str, name: str) -> Optional[str]:
        """Attribute of the first match, trimmed."""
        element = self.first(selector)
        if element is None:
            return None
        return _clean(element.get(name))

    def text(self, selector: str) -> Optional[str]:
        """Text content of the first match, trimmed."""
        element = self.first(selector)
        if element is None:
            return None
        return _clean(element.get_text())

    def meta(self, key: str) -> Optional[str]:
        """
        Content of a meta tag, looked up by property then by name.

        Sites disagree on which attribute carries Open Graph and Twitter
        keys, so both are tried for every lookup.
        """
        for attribute in ('property', 'name'):
            element = self._soup.find('meta', attrs={attribute: key})
            if element is not None:
                content = _clean(element.get('content'))
                if content:
                    return content
        return None

    def meta_tags(self) -> List:
        """Every <meta> element in document order."""
        return self._soup.find_all('meta')


def parse_document(html: Optional[str]) -> Tuple[Optional[Document], Optional[dict]]:
    """
    Parse HTML into a Document.

    Returns (Document, None) on success or (None, PreviewError) when the
    body is not something an HTML parser should be handed (binary data)
    or the parser rejects it outright.
    """
    if html is None:
        html = ''

    if '\x00' in html:
        return None, make_error(
            ErrorKind.PARSE_FAILED,
            'Failed to parse page',
            'Response body is not HTML'
        )

    try:
        soup = BeautifulSoup(html, PARSER)
    except ParserRejectedMarkup:
        return None, make_error(
            ErrorKind.PARSE_FAILED,
            'Failed to parse page',
            'Parser rejected the markup'
        )

    return Document(soup), None
