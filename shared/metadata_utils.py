"""
Generic metadata extraction for link previews.

Each field is an ordered fallback chain; the first non-empty candidate wins.
The order of candidates below is what clients observe, so changing it
changes previews for real sites.
"""

from typing import Dict, Optional

from .document_utils import Document
from .url_utils import resolve_against_origin

DEFAULT_FAVICON_PATH = '/favicon.ico'

# Tried in order; exact rel values
FAVICON_SELECTORS = [
    'link[rel="icon"]',
    'link[rel="shortcut icon"]',
    'link[rel="apple-touch-icon"]',
]

META_PROPERTY_PREFIX = 'og:'
META_NAME_PREFIX = 'twitter:'
DESCRIPTION_KEY = 'description'


def first_present(*candidates) -> Optional[str]:
    """
    Return the first candidate that is a non-empty string.

    Candidates may be values or zero-argument callables; callables are only
    invoked when every earlier candidate came up empty.
    """
    for candidate in candidates:
        value = candidate() if callable(candidate) else candidate
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def extract_title(document: Document) -> Optional[str]:
    return first_present(
        lambda: document.meta('og:title'),
        lambda: document.text('title'),
    )


def extract_description(document: Document) -> Optional[str]:
    return first_present(
        lambda: document.meta('og:description'),
        lambda: document.meta(DESCRIPTION_KEY),
    )


def extract_image(document: Document) -> Optional[str]:
    return first_present(
        lambda: document.meta('og:image'),
        lambda: document.attr('img', 'src'),
    )


def extract_favicon(document: Document, request_url: str) -> Optional[str]:
    """
    Find the page favicon as an absolute URL.

    Relative hrefs resolve against the origin of the URL the client asked
    for, not wherever redirects ended up.
    """
    candidates = [lambda selector=selector: document.attr(selector, 'href')
                  for selector in FAVICON_SELECTORS]
    icon = first_present(*candidates, DEFAULT_FAVICON_PATH)
    return resolve_against_origin(icon, request_url)


def _meta_key(tag) -> Optional[str]:
    """Normalized MetaMap key for a meta tag, or None if not collected."""
    prop = tag.get('property')
    name = tag.get('name')

    if isinstance(prop, str) and prop.startswith(META_PROPERTY_PREFIX):
        return prop.replace(':', '_')
    if isinstance(name, str) and name.startswith(META_NAME_PREFIX):
        return name.replace(':', '_')
    if DESCRIPTION_KEY in (prop, name):
        return DESCRIPTION_KEY
    return None


def extract_meta_map(document: Document) -> Dict[str, str]:
    """
    Collect Open Graph, Twitter card and description meta tags.

    Keys are the attribute value with ':' replaced by '_'
    (og:title -> og_title). Later tags overwrite earlier ones.
    """
    meta = {}
    for tag in document.meta_tags():
        key = _meta_key(tag)
        content = tag.get('content')
        if key and isinstance(content, str):
            meta[key] = content.strip()
    return meta


def extract_metadata(document: Document, request_url: str) -> dict:
    """Extract the generic preview fields from a parsed page."""
    return {
        'title': extract_title(document),
        'description': extract_description(document),
        'image': extract_image(document),
        'favicon': extract_favicon(document, request_url),
        'meta': extract_meta_map(document),
    }
