# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infisical secrets client backed by the ``infisical`` CLI.

Two commands are used:

    infisical login --silent --method=universal-auth \\
        --client-id=<ID> --client-secret=<SECRET> --plain
    infisical export --silent --format=dotenv \\
        --token <TOKEN> --projectId <PROJECT> --env <ENV>

``login --plain`` prints the bare access token. ``export`` prints the secrets
as a dotenv document, which is parsed with the same dotenv parser as local
files (without variable expansion, since exported values are literal).

The CLI runs with the caller's running environment, so settings such as
``INFISICAL_API_URL`` picked up from the shell or the default dotenv file reach
it. Nothing the CLI prints on stderr is attached to errors unsanitized.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from infisical_run.enums import EnumVariableSource
from infisical_run.errors import (
    ModelResolverErrorContext,
    SecretsAuthenticationError,
    SecretsClientError,
)
from infisical_run.models import ModelVariableSet
from infisical_run.runtime.constants_env import (
    INFISICAL_CLI_DOCS_URL,
    INFISICAL_CLI_EXECUTABLE,
)
from infisical_run.runtime.dotenv_loader import parse_dotenv_text
from infisical_run.utils import sanitize_error_string

logger = logging.getLogger(__name__)


class ModelInfisicalCliConfig(BaseModel):
    """Configuration for ``AdapterInfisicalCli``.

    Attributes:
        executable: Name or path of the ``infisical`` binary.
        timeout_seconds: Per-command timeout; None waits indefinitely.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str = Field(
        default=INFISICAL_CLI_EXECUTABLE,
        min_length=1,
        description="Name or path of the infisical CLI.",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-command timeout in seconds.",
    )


class AdapterInfisicalCli:
    """``ProtocolSecretsClient`` implementation that shells out to the CLI.

    Example:
        >>> client = AdapterInfisicalCli(environ=os.environ)
        >>> token = client.authenticate("client-id", "client-secret")
        >>> secrets = client.fetch_secrets(token, "project-id", "dev")
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        config: ModelInfisicalCliConfig | None = None,
    ) -> None:
        self._environ = dict(environ) if environ is not None else None
        self._config = config or ModelInfisicalCliConfig()

    def _run(self, operation: str, args: Sequence[str]) -> str:
        """Run an infisical subcommand and return its stdout.

        Raises:
            SecretsClientError: If the executable is missing, times out or
                exits non-zero.
        """
        context = ModelResolverErrorContext(
            source=EnumVariableSource.SECRETS,
            operation=operation,
            target_name=self._config.executable,
        )
        command = [self._config.executable, *args]
        try:
            proc = subprocess.run(
                command,
                env=self._environ,
                capture_output=True,
                text=True,
                timeout=self._config.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as e:
            raise SecretsClientError(
                f"The infisical CLI was not found. See {INFISICAL_CLI_DOCS_URL} "
                "for installation instructions.",
                context=context,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise SecretsClientError(
                f"infisical {operation} timed out after {self._config.timeout_seconds}s",
                context=context,
            ) from e
        except OSError as e:
            raise SecretsClientError(
                f"failed to run infisical {operation}: {e.strerror or e}",
                context=context,
            ) from e

        if proc.returncode != 0:
            stderr = sanitize_error_string((proc.stderr or "").strip())
            error_cls = (
                SecretsAuthenticationError if operation == "login" else SecretsClientError
            )
            raise error_cls(
                f"infisical {operation} failed with exit code {proc.returncode}"
                + (f": {stderr}" if stderr else ""),
                context=context,
                returncode=proc.returncode,
            )
        return proc.stdout or ""

    def authenticate(self, client_id: str, client_secret: str) -> str:
        stdout = self._run(
            "login",
            [
                "login",
                "--silent",
                "--method=universal-auth",
                f"--client-id={client_id}",
                f"--client-secret={client_secret}",
                "--plain",
            ],
        )
        token = stdout.strip()
        if not token:
            raise SecretsAuthenticationError(
                "infisical login returned no token",
                context=ModelResolverErrorContext(
                    source=EnumVariableSource.SECRETS,
                    operation="login",
                    target_name=self._config.executable,
                ),
            )
        return token

    def fetch_secrets(
        self,
        token: str,
        project_id: str,
        environment: str,
    ) -> ModelVariableSet:
        stdout = self._run(
            "export",
            [
                "export",
                "--silent",
                "--format=dotenv",
                "--token",
                token,
                "--projectId",
                project_id,
                "--env",
                environment,
            ],
        )
        try:
            secrets = parse_dotenv_text(stdout)
        except ValueError as e:
            raise SecretsClientError(
                "infisical export returned malformed output",
                context=ModelResolverErrorContext(
                    source=EnumVariableSource.SECRETS,
                    operation="export",
                    target_name=project_id,
                ),
            ) from e
        logger.debug(
            "fetched %d secrets",
            len(secrets),
            extra={"project_id": project_id, "environment": environment},
        )
        return secrets


__all__ = ["AdapterInfisicalCli", "ModelInfisicalCliConfig"]
