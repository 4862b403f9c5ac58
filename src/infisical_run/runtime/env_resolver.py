# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Layered environment resolution.

EnvResolver composes the variables a wrapped command is launched with from
four sources: the inherited shell session, the default dotenv file, any
additional dotenv files, and the Infisical secrets manager.

Precedence (highest first):
    1. Shell session / command line (unless ``keep_shell_env`` is off)
    2. Additional dotenv files, later files over earlier ones
    3. Default dotenv file
    4. Infisical secrets
    5. Shell session, when ``keep_shell_env`` is off

Resolution Order:
    1. Invocation guard already set -> return the shell env untouched
    2. Set the invocation guard
    3. Decide whether secrets are skipped (flag / already-loaded indicator,
       both overridden by force)
    4. Snapshot the shell env (when keeping it)
    5. Load the default dotenv file (pre-authentication pass; it may carry
       the credentials)
    6. Authenticate, resolve the project identity, fetch secrets, merge them,
       then load the default dotenv file again so it outranks the secrets
    7. Load the additional dotenv files in order
    8. Reapply the shell snapshot (when keeping it)

The two-pass default dotenv load is load-bearing: the first pass makes its
credentials available for step 6, the second restores its precedence over
secrets. Additional dotenv files are only loaded once, after secrets.

Every step works on an explicit ``ModelVariableSet``; nothing here reads or
writes ``os.environ``. The CLI hands the result to the process launcher.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from pydantic import SecretStr

from infisical_run.adapters import create_secrets_client
from infisical_run.enums import EnumVariableSource
from infisical_run.errors import (
    AuthenticationConfigurationError,
    EnvResolverError,
    ModelResolverErrorContext,
    ResolverConfigurationError,
    SecretsClientError,
)
from infisical_run.models import (
    ModelEnvResolverConfig,
    ModelProjectConfig,
    ModelProjectIdentity,
    ModelResolutionResult,
    ModelResolvedLayer,
    ModelVariableSet,
)
from infisical_run.protocols import ProtocolSecretsClient
from infisical_run.runtime.constants_env import (
    DEFAULT_ENVIRONMENT,
    ENV_INFISICAL_CLIENT_ID,
    ENV_INFISICAL_CLIENT_SECRET,
    ENV_INFISICAL_ENVIRONMENT,
    ENV_INFISICAL_PROJECT_ID,
    ENV_INFISICAL_TOKEN,
    ENV_INVOCATION_GUARD,
    INVOCATION_GUARD_VALUE,
    LOADED_INDICATOR_VARS,
)
from infisical_run.runtime.dotenv_loader import DotenvLoader
from infisical_run.runtime.project_config_loader import load_project_config
from infisical_run.utils import any_flag_set, sanitize_error_message

logger = logging.getLogger(__name__)

SecretsClientFactory = Callable[[Mapping[str, str]], ProtocolSecretsClient]
ProjectConfigLoader = Callable[[Path], ModelProjectConfig]


def is_invocation_guard_set(environ: Mapping[str, str]) -> bool:
    """Return True when an enclosing infisical-run already resolved this env."""
    return bool(environ.get(ENV_INVOCATION_GUARD))


class EnvResolver:
    """Resolves the environment for a wrapped command.

    Example:
        >>> config = ModelEnvResolverConfig(extra_dotenv_files=(Path(".env.local"),))
        >>> result = EnvResolver(config).resolve(os.environ)
        >>> launch_process(command, result.environment.to_environ())
    """

    def __init__(
        self,
        config: ModelEnvResolverConfig,
        secrets_client_factory: SecretsClientFactory | None = None,
        dotenv_loader: DotenvLoader | None = None,
        project_config_loader: ProjectConfigLoader = load_project_config,
    ) -> None:
        """Initialize EnvResolver.

        Args:
            config: Layers, explicit credentials and project identity.
            secrets_client_factory: Builds the secrets client from the running
                environment. Only called when secrets are actually loaded.
                Defaults to the adapter for ``config.backend``.
            dotenv_loader: Dotenv file loader.
            project_config_loader: Reader for the local project config file.
        """
        self._config = config
        self._secrets_client_factory: SecretsClientFactory = (
            secrets_client_factory
            or (lambda environ: create_secrets_client(config.backend, environ))
        )
        self._dotenv_loader = dotenv_loader or DotenvLoader()
        self._project_config_loader = project_config_loader

    @property
    def config(self) -> ModelEnvResolverConfig:
        return self._config

    def should_skip_secrets(self, shell_env: Mapping[str, str]) -> bool:
        """Decide whether the secrets manager is skipped.

        Secrets are skipped when ``skip_secrets`` is set or an already-loaded
        indicator is truthy in the shell env. ``force_secrets`` overrides both.
        """
        if self._config.force_secrets:
            return False
        if self._config.skip_secrets:
            return True
        if any_flag_set(shell_env, LOADED_INDICATOR_VARS):
            logger.debug("secrets already loaded according to the environment")
            return True
        return False

    def resolve(self, shell_env: Mapping[str, str]) -> ModelResolutionResult:
        """Resolve the final environment from the inherited shell environment.

        Args:
            shell_env: Environment inherited from the calling shell.

        Returns:
            The merged environment and the layers that produced it.

        Raises:
            AuthenticationConfigurationError: Secrets required but neither a
                token nor a complete machine identity is available.
            ResolverConfigurationError: Secrets required but no project ID.
            DotenvFileNotFoundError: An additional dotenv file does not exist.
            SecretsClientError: The secrets client failed.
        """
        running = ModelVariableSet.from_mapping(shell_env)

        if is_invocation_guard_set(shell_env):
            logger.debug(
                "already launched by an earlier instance, short-circuiting to launch the command"
            )
            return ModelResolutionResult(environment=running, short_circuited=True)

        context = ModelResolverErrorContext.with_correlation(
            source=EnumVariableSource.SECRETS,
            operation="load_secrets",
        )
        correlation_id = context.correlation_id
        running = running.with_variable(ENV_INVOCATION_GUARD, INVOCATION_GUARD_VALUE)
        skip_secrets = self.should_skip_secrets(shell_env)

        snapshot: ModelVariableSet | None = None
        if self._config.keep_shell_env:
            logger.debug("backing up shell session environment variables")
            snapshot = running

        layers: list[ModelResolvedLayer] = []
        running = self._apply_default_dotenv(
            running, EnumVariableSource.DEFAULT_DOTENV_PRE, layers
        )

        identity: ModelProjectIdentity | None = None
        if not skip_secrets:
            secrets, identity = self._load_secrets(running, context)
            running = running.merged_with(secrets)
            layers.append(
                ModelResolvedLayer(
                    source=EnumVariableSource.SECRETS,
                    origin=f"{identity.project_id}/{identity.environment_name}",
                    keys=tuple(secrets.keys()),
                )
            )
            running = self._apply_default_dotenv(
                running, EnumVariableSource.DEFAULT_DOTENV_POST, layers
            )

        for path in self._config.extra_dotenv_files:
            loaded = self._dotenv_loader.load(
                path, base=running, source=EnumVariableSource.EXTRA_DOTENV
            )
            running = running.merged_with(loaded)
            layers.append(
                ModelResolvedLayer(
                    source=EnumVariableSource.EXTRA_DOTENV,
                    origin=str(path),
                    keys=tuple(loaded.keys()),
                )
            )

        if snapshot is not None:
            logger.debug("restoring shell environment")
            running = running.merged_with(snapshot)
            layers.append(
                ModelResolvedLayer(
                    source=EnumVariableSource.SHELL_SNAPSHOT,
                    origin="shell",
                    keys=tuple(snapshot.keys()),
                )
            )

        logger.debug(
            "loading complete",
            extra={
                "correlation_id": str(correlation_id),
                "layers": [layer.source.value for layer in layers],
                "variable_count": len(running),
            },
        )
        return ModelResolutionResult(
            environment=running,
            layers=tuple(layers),
            secrets_loaded=identity is not None,
            project=identity,
        )

    def _apply_default_dotenv(
        self,
        running: ModelVariableSet,
        source: EnumVariableSource,
        layers: list[ModelResolvedLayer],
    ) -> ModelVariableSet:
        """Merge the default dotenv file over ``running`` if enabled and present."""
        if not self._config.load_default_dotenv:
            return running
        path = self._config.default_dotenv_path
        if not path.is_file():
            logger.debug("default %s file not found", path)
            return running
        loaded = self._dotenv_loader.load(path, base=running, source=source)
        layers.append(
            ModelResolvedLayer(source=source, origin=str(path), keys=tuple(loaded.keys()))
        )
        return running.merged_with(loaded)

    @staticmethod
    def _lookup(
        explicit: SecretStr | str | None,
        name: str,
        running: ModelVariableSet,
    ) -> str | None:
        """Return the explicit value if given, else the running env value."""
        if isinstance(explicit, SecretStr):
            explicit = explicit.get_secret_value()
        return explicit or running.get(name) or None

    def _load_secrets(
        self,
        running: ModelVariableSet,
        context: ModelResolverErrorContext,
    ) -> tuple[ModelVariableSet, ModelProjectIdentity]:
        """Authenticate and fetch the secret set.

        Returns:
            The fetched secrets and the project identity they came from.
        """
        correlation_id = context.correlation_id

        token = self._lookup(self._config.token, ENV_INFISICAL_TOKEN, running)
        credentials = (
            None if token is not None else self._require_credentials(running, context)
        )

        client = self._secrets_client_factory(running.to_environ())
        try:
            if credentials is not None:
                logger.debug("obtaining infisical token")
                token = client.authenticate(*credentials)

            identity = self._resolve_project_identity(running, context)

            logger.debug(
                "fetching secrets from infisical",
                extra={
                    "correlation_id": str(correlation_id),
                    "project_id": identity.project_id,
                    "environment": identity.environment_name,
                },
            )
            secrets = client.fetch_secrets(
                str(token), identity.project_id, identity.environment_name
            )
        except EnvResolverError:
            raise
        except Exception as e:
            raise SecretsClientError(
                f"secrets client failed: {sanitize_error_message(e)}",
                context=context,
            ) from e
        return secrets, identity

    def _require_credentials(
        self,
        running: ModelVariableSet,
        context: ModelResolverErrorContext,
    ) -> tuple[str, str]:
        """Return (client_id, client_secret), failing fast if either is missing."""
        client_id = self._lookup(self._config.client_id, ENV_INFISICAL_CLIENT_ID, running)
        client_secret = self._lookup(
            self._config.client_secret, ENV_INFISICAL_CLIENT_SECRET, running
        )
        if client_id is None or client_secret is None:
            missing = [
                name
                for name, value in (
                    (ENV_INFISICAL_CLIENT_ID, client_id),
                    (ENV_INFISICAL_CLIENT_SECRET, client_secret),
                )
                if value is None
            ]
            raise AuthenticationConfigurationError(
                f"missing {', '.join(missing)}: no {ENV_INFISICAL_TOKEN} available, "
                "unable to authenticate to obtain a token",
                missing=missing,
                context=context,
            )
        return client_id, client_secret

    def _resolve_project_identity(
        self,
        running: ModelVariableSet,
        context: ModelResolverErrorContext,
    ) -> ModelProjectIdentity:
        """Resolve project ID and environment: explicit, env, config file, fallback."""
        project_id = self._lookup(self._config.project_id, ENV_INFISICAL_PROJECT_ID, running)
        environment = self._lookup(
            self._config.environment, ENV_INFISICAL_ENVIRONMENT, running
        )

        if project_id is None or environment is None:
            # The token-based login path does not read the project config file
            # itself, so read it here.
            file_config = self._project_config_loader(self._config.project_config_path)
            project_id = project_id or file_config.workspace_id
            environment = environment or file_config.default_environment

        if project_id is None:
            raise ResolverConfigurationError(
                f"missing {ENV_INFISICAL_PROJECT_ID}",
                context=context,
                project_config_path=str(self._config.project_config_path),
            )
        return ModelProjectIdentity(
            project_id=project_id,
            environment_name=environment or DEFAULT_ENVIRONMENT,
        )


__all__ = ["EnvResolver", "SecretsClientFactory", "is_invocation_guard_set"]
