# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infisical secrets client backed by the ``infisicalsdk`` package.

An alternative to the CLI backend for hosts where the ``infisical`` binary is
not installed. The SDK is imported lazily when a call is made, so the CLI
backend works without it.

Each call builds its own ``InfisicalSDKClient``: ``authenticate`` performs a
universal-auth login and returns the access token, ``fetch_secrets`` builds a
client around a token and lists the secrets at the root path of the
environment, with secret references expanded and imports included.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from infisical_run.enums import EnumVariableSource
from infisical_run.errors import (
    ModelResolverErrorContext,
    SecretsAuthenticationError,
    SecretsClientError,
)
from infisical_run.models import ModelVariableSet
from infisical_run.runtime.constants_env import DEFAULT_INFISICAL_API_URL
from infisical_run.utils import sanitize_error_message

logger = logging.getLogger(__name__)


class ModelInfisicalSdkConfig(BaseModel):
    """Configuration for ``AdapterInfisicalSdk``.

    Attributes:
        host: Infisical API base URL.
        secret_path: Folder to list secrets from.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = Field(
        default=DEFAULT_INFISICAL_API_URL,
        min_length=1,
        description="Infisical API base URL.",
    )
    secret_path: str = Field(
        default="/",
        description="Secret folder path.",
    )


class AdapterInfisicalSdk:
    """``ProtocolSecretsClient`` implementation using ``infisicalsdk``."""

    def __init__(self, config: ModelInfisicalSdkConfig | None = None) -> None:
        self._config = config or ModelInfisicalSdkConfig()

    def _context(self, operation: str) -> ModelResolverErrorContext:
        return ModelResolverErrorContext(
            source=EnumVariableSource.SECRETS,
            operation=operation,
            target_name=self._config.host,
        )

    def _new_client(self, token: str | None = None) -> object:
        """Create an SDK client, importing the SDK on first use.

        Raises:
            SecretsClientError: If the infisicalsdk package is not installed.
        """
        try:
            from infisical_sdk import InfisicalSDKClient
        except ImportError as e:
            raise SecretsClientError(
                "infisicalsdk package is not installed; install it with "
                "'pip install infisicalsdk' or use --backend cli",
                context=self._context("initialize"),
            ) from e
        if token is None:
            return InfisicalSDKClient(host=self._config.host)
        return InfisicalSDKClient(host=self._config.host, token=token)

    @staticmethod
    def _extract_secret_value(secret: object) -> str:
        """Read a secret value, accepting both camelCase and snake_case SDK models."""
        value = getattr(secret, "secretValue", None)
        if value is None:
            value = getattr(secret, "secret_value", None)
        return "" if value is None else str(value)

    @staticmethod
    def _extract_secret_key(secret: object) -> str | None:
        key = getattr(secret, "secretKey", None)
        if key is None:
            key = getattr(secret, "secret_key", None)
        return None if key is None else str(key)

    def authenticate(self, client_id: str, client_secret: str) -> str:
        client = self._new_client()
        logger.debug("obtaining infisical token via SDK", extra={"host": self._config.host})
        try:
            response = client.auth.universal_auth.login(  # type: ignore[attr-defined]
                client_id=client_id,
                client_secret=client_secret,
            )
        except Exception as e:
            raise SecretsAuthenticationError(
                f"Infisical authentication failed: {sanitize_error_message(e)}",
                context=self._context("login"),
            ) from e

        token = getattr(response, "accessToken", None) or getattr(
            response, "access_token", None
        )
        if not token:
            raise SecretsAuthenticationError(
                "Infisical login returned no access token",
                context=self._context("login"),
            )
        return str(token)

    def fetch_secrets(
        self,
        token: str,
        project_id: str,
        environment: str,
    ) -> ModelVariableSet:
        client = self._new_client(token=token)
        logger.debug(
            "fetching secrets via SDK",
            extra={"project_id": project_id, "environment": environment},
        )
        try:
            response = client.secrets.list_secrets(  # type: ignore[attr-defined]
                project_id=project_id,
                environment_slug=environment,
                secret_path=self._config.secret_path,
                expand_secret_references=True,
                include_imports=True,
            )
        except Exception as e:
            raise SecretsClientError(
                f"Failed to list secrets: {sanitize_error_message(e)}",
                context=self._context("list_secrets"),
                project_id=project_id,
                environment=environment,
            ) from e

        variables: dict[str, str] = {}
        for secret in getattr(response, "secrets", None) or []:
            key = self._extract_secret_key(secret)
            if not key:
                raise SecretsClientError(
                    "Infisical returned a secret without a name",
                    context=self._context("list_secrets"),
                )
            variables[key] = self._extract_secret_value(secret)

        logger.debug("fetched %d secrets", len(variables))
        return ModelVariableSet.from_mapping(variables)


__all__ = ["AdapterInfisicalSdk", "ModelInfisicalSdkConfig"]
