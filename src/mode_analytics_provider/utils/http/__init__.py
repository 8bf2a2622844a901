"""HTTP utilities public API (barrel module).

This package provides:
- The authenticated client shared by every handler
- The rate-limit aware request executor
- Deletion verification for eventually consistent deletes
- Response helpers for status checks and HAL listings

Recommended import pattern for consumers:
    from mode_analytics_provider.utils.http import http_retry, check_deletion
"""

from .client import ModeAuthenticatedClient, basic_auth_header, create_mode_client
from .deletion import (
    DeletionState,
    check_deletion,
    collection_listing_url,
    is_nested_collection_item_url,
)
from .request import (
    RATE_LIMIT_ATTEMPTS,
    RATE_LIMIT_DELAY,
    HTTPResponse,
    decode_json,
    http_retry,
    parse_model,
    raise_for_unexpected,
)
from .waiting import run_or_cancel, wait_or_cancel

__all__ = [
    "ModeAuthenticatedClient",
    "basic_auth_header",
    "create_mode_client",
    "DeletionState",
    "check_deletion",
    "collection_listing_url",
    "is_nested_collection_item_url",
    "RATE_LIMIT_ATTEMPTS",
    "RATE_LIMIT_DELAY",
    "HTTPResponse",
    "decode_json",
    "http_retry",
    "parse_model",
    "raise_for_unexpected",
    "run_or_cancel",
    "wait_or_cancel",
]
