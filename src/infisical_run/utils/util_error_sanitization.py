# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

The secrets client is handed machine identity credentials and tokens on its
command line, and its stderr may echo them back. Anything taken from the
client's output passes through these helpers before it is logged or attached
to an error.

Example:
    >>> from infisical_run.utils import sanitize_error_string
    >>> sanitize_error_string("login failed for --client-secret=abc123")
    '[REDACTED - potentially sensitive data]'
"""

from __future__ import annotations

# Patterns that may indicate sensitive data in error messages.
# These patterns are checked case-insensitively against the error message.
SENSITIVE_PATTERNS: tuple[str, ...] = (
    # Credentials
    "password",
    "passwd",
    # Secrets and keys
    "secret",
    "token",
    "api_key",
    "apikey",
    "api-key",
    "private_key",
    "private-key",
    # Authentication
    "credential",
    "bearer",
    "authorization",
    # Key material
    "-----begin",
    "-----end",
)


def sanitize_error_string(error_str: str, max_length: int = 500) -> str:
    """Sanitize a raw error string for safe inclusion in logs and errors.

    Sanitization rules:
        1. If a sensitive pattern is present, return a generic redacted message
        2. Truncate long messages

    Args:
        error_str: The error string to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        Sanitized error message safe for logging.
    """
    if not error_str:
        return ""

    error_lower = error_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in error_lower:
            return "[REDACTED - potentially sensitive data]"

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"

    return error_str


def sanitize_error_message(exception: Exception, max_length: int = 500) -> str:
    """Sanitize an exception message, prefixed with the exception type.

    Returns:
        ``"{ExceptionType}: {sanitized_message}"``

    Example:
        >>> sanitize_error_message(ConnectionError("Bearer abc rejected"))
        'ConnectionError: [REDACTED - potentially sensitive data]'
    """
    exception_type = type(exception).__name__
    return f"{exception_type}: {sanitize_error_string(str(exception), max_length)}"


__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
]
