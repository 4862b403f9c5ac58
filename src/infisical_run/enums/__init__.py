# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Enumerations for infisical-run.

Exports:
    EnumResolverErrorCode: Error codes for fatal resolver errors
    EnumSecretsBackend: Secrets client implementations (CLI, SDK)
    EnumVariableSource: Variable layers in ascending precedence order
"""

from infisical_run.enums.enum_resolver_error_code import EnumResolverErrorCode
from infisical_run.enums.enum_secrets_backend import EnumSecretsBackend
from infisical_run.enums.enum_variable_source import EnumVariableSource

__all__: list[str] = [
    "EnumResolverErrorCode",
    "EnumSecretsBackend",
    "EnumVariableSource",
]
