"""Secure logging utilities.

This module keeps credentials out of provider logs:
- Pattern matching for Basic/Bearer credentials and long API keys
- Header sanitization for request debug logging
- A logging formatter that redacts every record it formats
"""

import copy
import logging
import re
import sys
from typing import Any, Dict

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9_-]+", re.IGNORECASE),
    "api_key": re.compile(r"[A-Za-z0-9]{32,}"),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
}


def sanitize_string(value: str, partial: bool = False) -> str:
    """Redact credentials embedded in a string.

    Each sensitive match is replaced in place, so the rest of the
    message (URLs, status codes) stays readable.

    :param value: String to sanitize
    :type value: str
    :param partial: If True, keep the length of each redacted match
    :type partial: bool
    :return: Sanitized string with sensitive data redacted
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        if partial:
            value = pattern.sub(
                lambda m, name=pattern_name: f"<{name}:length={len(m.group(0))}>",
                value,
            )
        else:
            value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Dictionary of HTTP headers
    :type headers: Dict[str, Any]
    :return: Sanitized headers dictionary
    :rtype: Dict[str, Any]
    """
    if not headers:
        return headers
    sanitized = copy.deepcopy(dict(headers))
    for key, value in sanitized.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and len(value) > 0:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
    return sanitized


class SanitizingFormatter(logging.Formatter):
    """Formatter that automatically sanitizes sensitive data."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with automatic sanitization.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log message
        :rtype: str
        """
        try:
            # Format first so args that don't match the format string don't break us
            if record.args:
                try:
                    record.msg = sanitize_string(record.msg % record.args)
                    record.args = None
                except (TypeError, ValueError):
                    record.msg = sanitize_string(str(record.msg))
                    record.args = tuple(
                        sanitize_string(arg) if isinstance(arg, str) else arg
                        for arg in record.args
                    )
            else:
                record.msg = sanitize_string(str(record.msg))
        except Exception as e:
            print(f"Warning: Failed to sanitize log record: {e}", file=sys.stderr)

        return super().format(record)


_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up logging with automatic sanitization.

    Terraform reads the plugin's stdout as protocol traffic, so log
    records go to stderr. Repeated calls are no-ops.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        SanitizingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request at INFO; keep it at WARNING unless debugging
    if level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
