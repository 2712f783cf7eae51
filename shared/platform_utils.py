"""
Platform detection and platform-specific enrichment.

Detection is a plain substring match on the URL's host and path. Each
platform has one enricher that reads the page and returns its own block;
the generic metadata passed in is treated as read-only, so generic fields
always survive next to the platform block.
"""

from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from .document_utils import Document
from .metadata_utils import first_present

WEBSITE = 'website'
TELEGRAM = 'telegram'
WHATSAPP = 'whatsapp'

# Checked in this order; first match wins
WHATSAPP_PATTERNS = ['chat.whatsapp.com', 'whatsapp.com']
TELEGRAM_PATTERNS = ['t.me']

TELEGRAM_URL_PREFIX = 'https://t.me/'

# t.me page markup
TELEGRAM_SELECTORS = {
    'title': '.tgme_page_title',
    'description': '.tgme_page_description',
    'photo': 'img.tgme_page_photo_image',
    'extra': '.tgme_page_extra',
    'verified': '.verified-icon',
    'username': '.tgme_channel_info_header_username a, a.tgme_username_link',
}


def detect_platform(url: str) -> str:
    """Classify a URL as 'whatsapp', 'telegram' or 'website'."""
    try:
        parsed = urlparse(url)
        target = (parsed.netloc + parsed.path).lower()
    except ValueError:
        target = url.lower()

    for pattern in WHATSAPP_PATTERNS:
        if pattern in target:
            return WHATSAPP

    for pattern in TELEGRAM_PATTERNS:
        if pattern in target:
            return TELEGRAM

    return WEBSITE


def classify_channel(member_summary: Optional[str]) -> str:
    """
    Guess the kind of Telegram chat from its member line.

    Examples:
        >>> classify_channel('1,234 subscribers')
        'public channel'
        >>> classify_channel('56 members, 3 online')
        'group'
    """
    summary = (member_summary or '').lower()
    if 'subscriber' in summary:
        return 'public channel'
    if 'member' in summary:
        return 'group'
    return 'unknown'


def extract_telegram_username(href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    if href.startswith(TELEGRAM_URL_PREFIX):
        href = href[len(TELEGRAM_URL_PREFIX):]
    return href.strip('/') or None


def extract_invite_code(url: str) -> Optional[str]:
    """Last non-empty path segment of a WhatsApp invite URL."""
    try:
        path = urlparse(url).path
    except ValueError:
        return None
    return path.rstrip('/').rsplit('/', 1)[-1] or None


def enrich_telegram(document: Document, url: str, metadata: dict) -> dict:
    member_summary = document.text(TELEGRAM_SELECTORS['extra'])
    return {
        'name': first_present(
            lambda: document.text(TELEGRAM_SELECTORS['title']),
            metadata.get('title'),
        ),
        'description': first_present(
            lambda: document.text(TELEGRAM_SELECTORS['description']),
            metadata.get('description'),
        ),
        'icon': first_present(
            lambda: document.attr(TELEGRAM_SELECTORS['photo'], 'src'),
            metadata.get('image'),
        ),
        'username': extract_telegram_username(
            document.attr(TELEGRAM_SELECTORS['username'], 'href')
        ),
        'memberSummary': member_summary,
        'verified': document.first(TELEGRAM_SELECTORS['verified']) is not None,
        'channelKind': classify_channel(member_summary),
    }


def enrich_whatsapp(document: Document, url: str, metadata: dict) -> dict:
    return {
        'inviteCode': extract_invite_code(url),
        'name': first_present(
            lambda: document.meta('og:title'),
            lambda: document.text('h1'),
            metadata.get('title'),
        ),
        'description': first_present(
            lambda: document.meta('og:description'),
            lambda: document.text('p'),
            metadata.get('description'),
        ),
        'icon': first_present(
            lambda: document.meta('og:image'),
            lambda: document.attr('img', 'src'),
            metadata.get('image'),
        ),
    }


PLATFORM_ENRICHERS: Dict[str, Callable[[Document, str, dict], dict]] = {
    TELEGRAM: enrich_telegram,
    WHATSAPP: enrich_whatsapp,
}


def enrich_platform(platform: str, document: Document, url: str, metadata: dict) -> Optional[dict]:
    """Run the enricher registered for platform, if any."""
    enricher = PLATFORM_ENRICHERS.get(platform)
    if enricher is None:
        return None
    return enricher(document, url, metadata)
