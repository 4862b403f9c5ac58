# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""infisical-run Errors Module.

Exports:
    ModelResolverErrorContext: Configuration model for bundled error context
    ModelResolverErrorDetail: Structured detail exposed as ``error.model``
    EnvResolverError: Base resolver error class
    ResolverConfigurationError: Missing or invalid configuration (project ID)
    AuthenticationConfigurationError: Neither token nor machine identity available
    DotenvFileNotFoundError: Explicitly requested dotenv file is missing
    SecretsClientError: Secrets client failure (CLI, SDK, network, response)
    SecretsAuthenticationError: Machine identity login failure
    ProcessLaunchError: Target command could not be executed

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Client secrets, tokens or secret values
        - Raw stderr of the secrets client without ``sanitize_error_string``
    SAFE to include:
        - Variable names, file paths, project IDs, environment names
"""

from infisical_run.errors.model_resolver_error_context import (
    ModelResolverErrorContext,
    ModelResolverErrorDetail,
)
from infisical_run.errors.resolver_errors import (
    AuthenticationConfigurationError,
    DotenvFileNotFoundError,
    EnvResolverError,
    ProcessLaunchError,
    ResolverConfigurationError,
    SecretsAuthenticationError,
    SecretsClientError,
)

__all__: list[str] = [
    "ModelResolverErrorContext",
    "ModelResolverErrorDetail",
    "EnvResolverError",
    "ResolverConfigurationError",
    "AuthenticationConfigurationError",
    "DotenvFileNotFoundError",
    "SecretsClientError",
    "SecretsAuthenticationError",
    "ProcessLaunchError",
]
