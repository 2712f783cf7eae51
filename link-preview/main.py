"""
Link Preview Cloud Function

Fetches a web page and returns a normalized link preview (title,
description, image, favicon, Open Graph / Twitter meta) for chat and
social clients that render rich link cards.

Responsibilities:
- Validate the requested URL
- Fetch the page (single attempt, bounded timeout and redirects)
- Extract generic metadata with ordered fallbacks
- Add Telegram / WhatsApp specific fields when the URL matches

Does NOT:
- Render JavaScript
- Cache, rate limit or authenticate (caller's job)
- Retry failed fetches (caller's job)
"""

import functions_framework
import requests
from bs4 import UnicodeDammit
from urllib3.exceptions import ReadTimeoutError
from urllib.parse import urlparse
import json
import os
import sys
import time
import traceback
from datetime import datetime, timezone

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.error_utils import ErrorKind, make_error, status_code_for, error_payload
from shared.url_utils import validate_url
from shared.document_utils import parse_document
from shared.metadata_utils import extract_metadata
from shared.platform_utils import detect_platform, enrich_platform

# Configuration
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
ACCEPT_HEADER = 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8'
FETCH_TIMEOUT = 8  # seconds
MAX_REDIRECTS = 5
CHUNK_SIZE = 8192
SUPPORTED_SCHEMES = ('http', 'https')

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Content-Type': 'application/json',
}

PREVIEW_ENDPOINT = '/preview?url=YOUR_URL'
EXAMPLE_URLS = [
    '/preview?url=https://github.com',
    '/preview?url=https://chat.whatsapp.com/Lx4ghKdTOeK6ehjra1K1cl',
    '/preview?url=https://t.me/telegram',
]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def decode_body(body: bytes, content_type: str) -> str:
    """
    Decode a response body.

    Uses the charset from Content-Type when present; otherwise lets
    UnicodeDammit sniff <meta charset> and the bytes themselves.
    """
    encoding = requests.utils.get_encoding_from_headers({'content-type': content_type})
    if encoding and 'charset' in content_type.lower():
        try:
            return body.decode(encoding, errors='replace')
        except LookupError:
            pass
    return UnicodeDammit(body, is_html=True).unicode_markup or ''


def fetch_webpage(url: str) -> tuple:
    """
    Fetch webpage content. Returns (fetch_result, error).

    fetch_result is {'status_code', 'body', 'final_url'}; error is a
    PreviewError dict. Exactly one attempt is made, and the whole request
    (redirects and body included) must finish within FETCH_TIMEOUT.
    """
    scheme = urlparse(url).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        return None, make_error(
            ErrorKind.FETCH_FAILED,
            'Failed to fetch URL',
            f'Unsupported URL scheme: {scheme}'
        )

    headers = {
        'User-Agent': USER_AGENT,
        'Accept': ACCEPT_HEADER,
        'Accept-Language': 'en-US,en;q=0.5',
    }
    timeout_error = make_error(ErrorKind.TIMEOUT, 'Request timeout')
    deadline = time.monotonic() + FETCH_TIMEOUT

    try:
        with requests.Session() as session:
            session.max_redirects = MAX_REDIRECTS
            with session.get(url, headers=headers, timeout=FETCH_TIMEOUT,
                             allow_redirects=True, stream=True) as response:

                if not 200 <= response.status_code < 300:
                    return None, make_error(
                        ErrorKind.UPSTREAM_STATUS,
                        f'Server error: {response.status_code}',
                        response.reason or None,
                        upstream_status=response.status_code
                    )

                # The socket timeout only bounds each read; a server
                # trickling bytes is cut off by the deadline
                if time.monotonic() > deadline:
                    return None, timeout_error
                chunks = []
                try:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        chunks.append(chunk)
                        if time.monotonic() > deadline:
                            return None, timeout_error
                except requests.exceptions.ConnectionError as e:
                    # iter_content wraps read timeouts as ConnectionError
                    if e.args and isinstance(e.args[0], ReadTimeoutError):
                        return None, timeout_error
                    raise

                return {
                    'status_code': response.status_code,
                    'body': decode_body(b''.join(chunks), response.headers.get('Content-Type', '')),
                    'final_url': response.url,
                }, None

    except requests.exceptions.Timeout:
        return None, timeout_error
    except requests.exceptions.ConnectionError:
        return None, make_error(ErrorKind.UNREACHABLE, 'Could not reach URL')
    except requests.exceptions.TooManyRedirects:
        return None, make_error(
            ErrorKind.FETCH_FAILED,
            'Failed to fetch URL',
            f'Exceeded {MAX_REDIRECTS} redirects'
        )
    except requests.exceptions.RequestException as e:
        return None, make_error(ErrorKind.FETCH_FAILED, 'Failed to fetch URL', type(e).__name__)


def build_preview(url: str, final_url: str, document) -> dict:
    """
    Assemble the PreviewResult for a parsed page.

    All extraction runs before the result is built, so a failure anywhere
    leaves nothing half-filled.
    """
    metadata = extract_metadata(document, url)
    platform = detect_platform(url)
    platform_data = enrich_platform(platform, document, url, metadata)

    result = {
        'url': url,
        'finalUrl': final_url,
        'type': platform,
        'success': True,
        'timestamp': utc_timestamp(),
        'title': metadata['title'],
        'description': metadata['description'],
        'image': metadata['image'],
        'favicon': metadata['favicon'],
        'meta': metadata['meta'],
    }
    if platform_data is not None:
        result[platform] = platform_data

    return result


def build_error_response(error: dict, headers: dict, **extra) -> tuple:
    """Convert a PreviewError into a (body, status, headers) tuple."""
    payload = error_payload(error)
    payload.update(extra)
    payload['timestamp'] = utc_timestamp()
    return (json.dumps(payload), status_code_for(error), headers)


def generate_preview(raw_url, headers: dict) -> tuple:
    """Run the preview pipeline for one ?url= value."""
    _, error = validate_url(raw_url)
    if error:
        extra = {}
        if not raw_url or not raw_url.strip():
            extra['example'] = '/preview?url=https://example.com'
        return build_error_response(error, headers, **extra)

    url = raw_url.strip()

    fetched, error = fetch_webpage(url)
    if error:
        print(f"Fetch error [{error['kind']}]: {url} - {error['message']}")
        return build_error_response(error, headers)

    document, error = parse_document(fetched['body'])
    if error:
        print(f"Parse error: {url} - {error['detail']}")
        return build_error_response(error, headers)

    response_data = build_preview(url, fetched['final_url'], document)
    return (json.dumps(response_data), 200, headers)


@functions_framework.http
def preview(request):
    """
    Main Cloud Function entry point.

    Expected request:
        GET /preview?url=https://example.com
    """
    headers = dict(CORS_HEADERS)

    if request.method != 'GET':
        headers['Allow'] = 'GET'
        return build_error_response(
            make_error(ErrorKind.METHOD_NOT_ALLOWED, 'Method not allowed'),
            headers
        )

    try:
        return generate_preview(request.args.get('url'), headers)
    except Exception:
        print(f"Unexpected error: {traceback.format_exc()}")
        return build_error_response(
            make_error(ErrorKind.UNEXPECTED, 'Internal server error'),
            headers
        )


@functions_framework.http
def index(request):
    """Service description for the function's root URL."""
    return (json.dumps({
        'message': 'Link Preview API',
        'status': 'online',
        'endpoint': PREVIEW_ENDPOINT,
        'examples': EXAMPLE_URLS,
    }), 200, dict(CORS_HEADERS))
