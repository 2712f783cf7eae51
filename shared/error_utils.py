"""
Error kinds and HTTP status mapping for the Link Preview function.

Every failure in the preview pipeline is reported as a PreviewError dict:

    {
        'kind': 'Timeout',
        'message': 'Request timed out',
        'detail': None,
        'upstream_status': None,
    }

Errors never cross module seams as exceptions; each stage returns a
(value, error) tuple and the HTTP handler turns the error into JSON.
"""

from typing import Optional


class ErrorKind:
    INVALID_INPUT = 'InvalidInput'
    TIMEOUT = 'Timeout'
    UPSTREAM_STATUS = 'UpstreamStatus'
    UNREACHABLE = 'Unreachable'
    PARSE_FAILED = 'ParseFailed'
    FETCH_FAILED = 'FetchFailed'
    UNEXPECTED = 'Unexpected'
    METHOD_NOT_ALLOWED = 'MethodNotAllowed'


ERROR_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.TIMEOUT: 408,
    ErrorKind.UPSTREAM_STATUS: 502,
    ErrorKind.UNREACHABLE: 502,
    ErrorKind.PARSE_FAILED: 500,
    ErrorKind.FETCH_FAILED: 500,
    ErrorKind.UNEXPECTED: 500,
}


def make_error(kind: str, message: str, detail: Optional[str] = None,
               upstream_status: Optional[int] = None) -> dict:
    """Create a PreviewError dict."""
    return {
        'kind': kind,
        'message': message,
        'detail': detail,
        'upstream_status': upstream_status,
    }


def status_code_for(error: dict) -> int:
    """HTTP status code for a PreviewError (500 for unknown kinds)."""
    return ERROR_STATUS_CODES.get(error.get('kind'), 500)


def error_payload(error: dict) -> dict:
    """
    Build the JSON body for a PreviewError.

    Always has 'error' (human readable) and 'errorKind'; 'details' and
    'upstreamStatus' only appear when known.
    """
    payload = {
        'success': False,
        'error': error['message'],
        'errorKind': error['kind'],
    }
    if error.get('detail'):
        payload['details'] = error['detail']
    if error.get('upstream_status') is not None:
        payload['upstreamStatus'] = error['upstream_status']
    return payload
