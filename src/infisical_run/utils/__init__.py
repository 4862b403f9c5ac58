# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility modules for infisical-run.

This package provides:
    - util_env_flags: Truthy parsing of boolean environment flags
    - util_error_sanitization: Error message sanitization for secure logging
"""

from infisical_run.utils.util_env_flags import any_flag_set, is_truthy
from infisical_run.utils.util_error_sanitization import (
    SENSITIVE_PATTERNS,
    sanitize_error_message,
    sanitize_error_string,
)

__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "any_flag_set",
    "is_truthy",
    "sanitize_error_message",
    "sanitize_error_string",
]
