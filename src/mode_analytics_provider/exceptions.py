"""Structured exception classes for the Mode Analytics provider."""

import json
from typing import Any, Dict, List, Optional


class ModeProviderError(Exception):
    """Base exception for all Mode Analytics provider errors.

    This exception serves as the parent class for all provider specific
    exceptions, providing a consistent interface that resource handlers
    translate into host diagnostics.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class ConfigurationError(ModeProviderError):
    """Raised when provider configuration is incomplete or invalid.

    :param message: Description of the configuration error
    :param missing: Optional names of the settings that were not provided
    """

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        """Initialize configuration error with message and missing settings."""
        details: Dict[str, Any] = {}
        if missing:
            details["missing"] = list(missing)
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)
        self.missing = list(missing or [])


class TransportError(ModeProviderError):
    """Raised when a request could not be built or sent.

    Covers DNS failures, refused connections, TLS errors, timeouts and
    malformed URLs. These are never retried by the request executor.

    :param message: Description of the transport failure
    :param url: URL of the failed request
    :param method: HTTP method of the failed request
    :param cause: Underlying exception
    """

    def __init__(
        self,
        message: str,
        url: str,
        method: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize transport error with request context and cause."""
        details: Dict[str, Any] = {"url": url}
        if method:
            details["method"] = method
        if cause is not None:
            details["cause"] = str(cause)
            details["error_type"] = type(cause).__name__
        super().__init__(message=message, code="TRANSPORT_ERROR", details=details)
        self.url = url
        self.method = method
        self.cause = cause


class APIError(ModeProviderError):
    """Raised when the API answers with an unexpected status code.

    :param message: Description of the API error
    :param url: URL of the request
    :param status_code: Optional HTTP status code from the API response
    :param response_body: Optional response body from the failed request
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        """Initialize API error with message and optional response details."""
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="API_ERROR", details=details)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(APIError):
    """Raised when the API is still rate limiting after every attempt.

    :param message: Description of the rate limit error
    :param url: URL of the request
    :param attempts: Number of attempts that were made
    """

    def __init__(self, message: str, url: Optional[str] = None, attempts: int = 0):
        """Initialize rate limit error with the attempt count."""
        super().__init__(message=message, url=url, status_code=429)
        self.code = "RATE_LIMIT_ERROR"
        self.attempts = attempts
        if attempts:
            self.details["attempts"] = attempts


class DecodeError(ModeProviderError):
    """Raised when a response body does not have the expected JSON shape.

    :param message: Description of the decode failure
    :param url: URL whose response could not be decoded
    :param cause: Underlying parsing or validation exception
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize decode error with URL and cause."""
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(message=message, code="DECODE_ERROR", details=details)
        self.url = url
        self.cause = cause


class DeletionTimeoutError(ModeProviderError):
    """Raised when deletion could not be confirmed within the polling budget.

    :param message: Description of the timeout
    :param url: URL of the resource being verified
    :param timeout: Polling budget in seconds
    :param polls: Number of polls that were issued
    """

    def __init__(self, message: str, url: str, timeout: float, polls: int = 0):
        """Initialize deletion timeout error."""
        super().__init__(
            message=message,
            code="DELETION_TIMEOUT",
            details={"url": url, "timeout": timeout, "polls": polls},
        )
        self.url = url
        self.timeout = timeout
        self.polls = polls


class DeletionVerificationError(APIError):
    """Raised when deletion verification ends in an error state.

    :param message: Description of the verification failure
    :param url: URL of the resource being verified
    :param status_code: Status code that ended verification
    :param listing_url: Collection listing checked after a 403, if any
    :param listing_status: Status the collection listing answered with
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        listing_url: Optional[str] = None,
        listing_status: Optional[int] = None,
    ):
        """Initialize deletion verification error."""
        super().__init__(message=message, url=url, status_code=status_code)
        self.code = "DELETION_VERIFICATION_ERROR"
        self.listing_url = listing_url
        self.listing_status = listing_status
        if listing_url:
            self.details["listing_url"] = listing_url
        if listing_status is not None:
            self.details["listing_status"] = listing_status


class OperationCancelledError(ModeProviderError):
    """Raised when the host cancels an in-flight retry or poll loop.

    :param message: Description of the cancelled operation
    :param url: Optional URL the operation was working on
    """

    def __init__(self, message: str, url: Optional[str] = None):
        """Initialize cancellation error."""
        details = {"url": url} if url else {}
        super().__init__(message=message, code="OPERATION_CANCELLED", details=details)
        self.url = url
