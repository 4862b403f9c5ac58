# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Environment variable names and defaults used by the resolver.

Credential and identity variables may come from the shell session or from the
default dotenv file; command-line flags override both. The indicator and
guard variables are only ever read from the inherited shell environment.

Example:
    >>> from infisical_run.runtime.constants_env import ENV_INFISICAL_TOKEN
    >>> ENV_INFISICAL_TOKEN
    'INFISICAL_TOKEN'
"""

from __future__ import annotations

from typing import Final

# Machine identity and token
ENV_INFISICAL_CLIENT_ID: Final[str] = "INFISICAL_CLIENT_ID"
ENV_INFISICAL_CLIENT_SECRET: Final[str] = "INFISICAL_CLIENT_SECRET"  # noqa: S105
ENV_INFISICAL_TOKEN: Final[str] = "INFISICAL_TOKEN"  # noqa: S105

# Project identity
ENV_INFISICAL_PROJECT_ID: Final[str] = "INFISICAL_PROJECT_ID"
ENV_INFISICAL_ENVIRONMENT: Final[str] = "INFISICAL_ENVIRONMENT"

# SDK backend host
ENV_INFISICAL_API_URL: Final[str] = "INFISICAL_API_URL"
DEFAULT_INFISICAL_API_URL: Final[str] = "https://app.infisical.com"

# Either of these set to a truthy value means secrets are already present in
# the environment and the secrets manager is skipped unless forced.
ENV_SECRETS_MANAGER_LOADED: Final[str] = "_SECRETS_MANAGER_LOADED"
ENV_INFISICAL_LOADED: Final[str] = "INFISICAL_LOADED"
LOADED_INDICATOR_VARS: Final[tuple[str, ...]] = (
    ENV_SECRETS_MANAGER_LOADED,
    ENV_INFISICAL_LOADED,
)

# Re-entrancy sentinel. Internal; must not be set by end users.
ENV_INVOCATION_GUARD: Final[str] = "_INFISICAL_RUN"
INVOCATION_GUARD_VALUE: Final[str] = "true"

# Enables debug logging when non-empty, like --verbose.
ENV_VERBOSE: Final[str] = "VERBOSE"

DEFAULT_ENVIRONMENT: Final[str] = "dev"
DEFAULT_DOTENV_FILE: Final[str] = ".env"
PROJECT_CONFIG_FILE: Final[str] = ".infisical.json"

INFISICAL_CLI_EXECUTABLE: Final[str] = "infisical"
INFISICAL_CLI_DOCS_URL: Final[str] = "https://infisical.com/docs/cli/overview"

__all__: list[str] = [
    "DEFAULT_DOTENV_FILE",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_INFISICAL_API_URL",
    "ENV_INFISICAL_API_URL",
    "ENV_INFISICAL_CLIENT_ID",
    "ENV_INFISICAL_CLIENT_SECRET",
    "ENV_INFISICAL_ENVIRONMENT",
    "ENV_INFISICAL_LOADED",
    "ENV_INFISICAL_PROJECT_ID",
    "ENV_INFISICAL_TOKEN",
    "ENV_INVOCATION_GUARD",
    "ENV_SECRETS_MANAGER_LOADED",
    "ENV_VERBOSE",
    "INFISICAL_CLI_DOCS_URL",
    "INFISICAL_CLI_EXECUTABLE",
    "INVOCATION_GUARD_VALUE",
    "LOADED_INDICATOR_VARS",
    "PROJECT_CONFIG_FILE",
]
