"""Shared extraction engine for the Link Preview function."""

from .error_utils import (
    ErrorKind,
    ERROR_STATUS_CODES,
    make_error,
    status_code_for,
    error_payload,
)

from .url_utils import (
    validate_url,
    get_origin,
    resolve_against_origin,
)

from .document_utils import (
    Document,
    parse_document,
)

from .metadata_utils import (
    first_present,
    extract_metadata,
)

from .platform_utils import (
    WEBSITE,
    TELEGRAM,
    WHATSAPP,
    detect_platform,
    enrich_platform,
)

__all__ = [
    # Errors
    'ErrorKind',
    'ERROR_STATUS_CODES',
    'make_error',
    'status_code_for',
    'error_payload',
    # URLs
    'validate_url',
    'get_origin',
    'resolve_against_origin',
    # Parsing
    'Document',
    'parse_document',
    # Metadata
    'first_present',
    'extract_metadata',
    # Platforms
    'WEBSITE',
    'TELEGRAM',
    'WHATSAPP',
    'detect_platform',
    'enrich_platform',
]
