"""
Error Contract Tests - Defines how failures reach the client.

Every failure is terminal for the request and maps to exactly one status:

    InvalidInput     400   missing / malformed ?url=
    MethodNotAllowed 405   anything other than GET
    Timeout          408   fetch exceeded the timeout
    UpstreamStatus   502   remote answered non-2xx (code carried along)
    Unreachable      502   DNS / connection failure
    ParseFailed      500   body could not be parsed as HTML
    FetchFailed      500   any other transport failure
    Unexpected       500   bug in the pipeline

Error bodies always carry 'error' and 'errorKind'; 'details' only when known.
"""

import pytest

from shared.error_utils import (
    ErrorKind,
    ERROR_STATUS_CODES,
    make_error,
    status_code_for,
    error_payload,
)


class TestStatusMapping:
    """Tests for status_code_for()"""

    @pytest.mark.parametrize("kind,status", [
        (ErrorKind.INVALID_INPUT, 400),
        (ErrorKind.METHOD_NOT_ALLOWED, 405),
        (ErrorKind.TIMEOUT, 408),
        (ErrorKind.UPSTREAM_STATUS, 502),
        (ErrorKind.UNREACHABLE, 502),
        (ErrorKind.PARSE_FAILED, 500),
        (ErrorKind.FETCH_FAILED, 500),
        (ErrorKind.UNEXPECTED, 500),
    ])
    def test_kind_to_status(self, kind, status):
        assert status_code_for(make_error(kind, 'message')) == status

    def test_unknown_kind_is_500(self):
        assert status_code_for(make_error('SomethingNew', 'message')) == 500

    def test_every_kind_is_mapped(self):
        kinds = [value for name, value in vars(ErrorKind).items() if name.isupper()]
        assert sorted(kinds) == sorted(ERROR_STATUS_CODES)


class TestErrorPayload:
    """Tests for error_payload()"""

    def test_minimal_payload(self):
        payload = error_payload(make_error(ErrorKind.TIMEOUT, 'Request timeout'))
        assert payload == {
            'success': False,
            'error': 'Request timeout',
            'errorKind': 'Timeout',
        }

    def test_details_included_when_known(self):
        payload = error_payload(make_error(ErrorKind.INVALID_INPUT, 'Invalid URL', 'URL must include a scheme and host'))
        assert payload['details'] == 'URL must include a scheme and host'

    def test_upstream_status_included(self):
        payload = error_payload(make_error(ErrorKind.UPSTREAM_STATUS, 'Server error: 503', upstream_status=503))
        assert payload['upstreamStatus'] == 503
        assert 'details' not in payload
