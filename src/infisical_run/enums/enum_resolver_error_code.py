# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Resolver Error Code Enumeration.

Classifies fatal resolver errors. The codes follow the error taxonomy of the
resolver: configuration problems, missing resources, failures of the external
secrets service, and failures to launch the target command.
"""

from enum import Enum


class EnumResolverErrorCode(str, Enum):
    """Error codes carried by ``EnvResolverError`` and its subclasses."""

    OPERATION_FAILED = "INFISICAL_RUN_001_OPERATION_FAILED"
    INVALID_CONFIGURATION = "INFISICAL_RUN_002_INVALID_CONFIGURATION"
    AUTHENTICATION_CONFIGURATION = "INFISICAL_RUN_003_AUTHENTICATION_CONFIGURATION"
    RESOURCE_NOT_FOUND = "INFISICAL_RUN_004_RESOURCE_NOT_FOUND"
    SECRETS_SERVICE_ERROR = "INFISICAL_RUN_005_SECRETS_SERVICE_ERROR"
    AUTHENTICATION_ERROR = "INFISICAL_RUN_006_AUTHENTICATION_ERROR"
    LAUNCH_FAILED = "INFISICAL_RUN_007_LAUNCH_FAILED"


__all__ = ["EnumResolverErrorCode"]
