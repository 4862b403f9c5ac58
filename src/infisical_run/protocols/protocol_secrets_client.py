# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for secrets manager clients.

The resolver never talks to Infisical directly. It depends on this two-call
capability so that the precedence logic can be exercised with a fake client,
and so that the CLI and SDK backends are interchangeable.

Design Decisions:
    - runtime_checkable: Enables isinstance() checks for duck typing
    - Synchronous: resolution is a single sequential pass with no concurrency
    - No retries: a single failure is fatal to the whole invocation
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from infisical_run.models import ModelVariableSet


@runtime_checkable
class ProtocolSecretsClient(Protocol):
    """Protocol for secrets manager clients.

    Implementations:
        - AdapterInfisicalCli: Shells out to the ``infisical`` CLI
        - AdapterInfisicalSdk: Uses the ``infisicalsdk`` package

    Example:
        >>> def load(client: ProtocolSecretsClient) -> ModelVariableSet:
        ...     token = client.authenticate("client-id", "client-secret")
        ...     return client.fetch_secrets(token, "project-id", "dev")
    """

    def authenticate(self, client_id: str, client_secret: str) -> str:
        """Exchange a machine identity for an access token.

        Args:
            client_id: Machine identity client ID.
            client_secret: Machine identity client secret.

        Returns:
            The access token.

        Raises:
            SecretsAuthenticationError: If the login is rejected or returns no token.
            SecretsClientError: If the client cannot be run or reached.
        """
        ...

    def fetch_secrets(
        self,
        token: str,
        project_id: str,
        environment: str,
    ) -> ModelVariableSet:
        """Fetch the flat secret set of a project environment.

        Args:
            token: Access token from ``authenticate`` or supplied by the caller.
            project_id: Infisical project ID.
            environment: Environment slug (e.g. ``dev``).

        Returns:
            Secret names mapped to values.

        Raises:
            SecretsClientError: On any failure. No partial result is returned.
        """
        ...


__all__ = ["ProtocolSecretsClient"]
