# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets client adapters.

Available Adapters:
- AdapterInfisicalCli: Shells out to the ``infisical`` CLI (default)
- AdapterInfisicalSdk: Uses the ``infisicalsdk`` Python package

``create_secrets_client`` builds the adapter for a backend from the running
environment at the moment secrets are about to be fetched.
"""

from __future__ import annotations

from collections.abc import Mapping

from infisical_run.adapters.adapter_infisical_cli import (
    AdapterInfisicalCli,
    ModelInfisicalCliConfig,
)
from infisical_run.adapters.adapter_infisical_sdk import (
    AdapterInfisicalSdk,
    ModelInfisicalSdkConfig,
)
from infisical_run.enums import EnumSecretsBackend
from infisical_run.protocols import ProtocolSecretsClient
from infisical_run.runtime.constants_env import (
    DEFAULT_INFISICAL_API_URL,
    ENV_INFISICAL_API_URL,
)


def create_secrets_client(
    backend: EnumSecretsBackend,
    environ: Mapping[str, str],
) -> ProtocolSecretsClient:
    """Build the secrets client for ``backend``.

    Args:
        backend: Which implementation to use.
        environ: Running environment; the CLI runs with it and the SDK reads
            ``INFISICAL_API_URL`` from it.
    """
    if backend is EnumSecretsBackend.SDK:
        host = environ.get(ENV_INFISICAL_API_URL) or DEFAULT_INFISICAL_API_URL
        return AdapterInfisicalSdk(ModelInfisicalSdkConfig(host=host))
    return AdapterInfisicalCli(environ=environ)


__all__: list[str] = [
    "AdapterInfisicalCli",
    "AdapterInfisicalSdk",
    "ModelInfisicalCliConfig",
    "ModelInfisicalSdkConfig",
    "create_secrets_client",
]
