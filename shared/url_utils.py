"""
URL helpers: input validation and origin-relative resolution.

Validation is permissive about schemes (anything with a scheme and a host
passes); the fetcher decides which schemes it can actually retrieve.
"""

import re
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse, ParseResult

from .error_utils import ErrorKind, make_error

WHITESPACE_RE = re.compile(r'\s')


def validate_url(raw_url: Optional[str]) -> Tuple[Optional[ParseResult], Optional[dict]]:
    """
    Validate the ?url= query value.

    Returns:
        (parsed_url, None) on success, (None, PreviewError) otherwise.

    Examples:
        >>> validate_url('https://example.com/page')[1] is None
        True
        >>> validate_url('not a url')[1]['kind']
        'InvalidInput'
    """
    if raw_url is None:
        return None, make_error(ErrorKind.INVALID_INPUT, 'Missing ?url= parameter')

    url = raw_url.strip()
    if not url:
        return None, make_error(ErrorKind.INVALID_INPUT, 'Missing ?url= parameter')

    if WHITESPACE_RE.search(url):
        return None, make_error(ErrorKind.INVALID_INPUT, 'Invalid URL', 'URL contains whitespace')

    try:
        parsed = urlparse(url)
        # Accessing port validates it (raises ValueError when out of range)
        parsed.port
    except ValueError:
        return None, make_error(ErrorKind.INVALID_INPUT, 'Invalid URL', 'URL could not be parsed')

    if not parsed.scheme or not parsed.netloc or not parsed.hostname:
        return None, make_error(ErrorKind.INVALID_INPUT, 'Invalid URL', 'URL must include a scheme and host')

    return parsed, None


def get_origin(url: str) -> Optional[str]:
    """Return scheme://host[:port] for an absolute URL (no userinfo), or None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    try:
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        return None
    if not host:
        return None

    # Credentials in the netloc never leave the request URL
    if ':' in host:
        host = f'[{host}]'
    if port is not None:
        host = f'{host}:{port}'
    return f"{parsed.scheme}://{host}"


def is_absolute_url(value: str) -> bool:
    """True when value already carries its own scheme and host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def resolve_against_origin(value: str, request_url: str) -> Optional[str]:
    """
    Resolve a possibly-relative reference against the origin of request_url.

    Absolute values are returned unchanged. Returns None when either side
    cannot be parsed.
    """
    if not value:
        return None
    if is_absolute_url(value):
        return value

    origin = get_origin(request_url)
    if not origin:
        return None
    try:
        return urljoin(origin + '/', value)
    except ValueError:
        return None
