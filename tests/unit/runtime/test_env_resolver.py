# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for EnvResolver.

Covers the invocation guard, secrets skip/force decisions, credential and
project identity resolution, the two-pass default dotenv load, additional
dotenv files and error wrapping. Precedence across all layers at once is in
test_env_resolver_precedence.py.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from infisical_run.enums import EnumResolverErrorCode, EnumVariableSource
from infisical_run.errors import (
    AuthenticationConfigurationError,
    DotenvFileNotFoundError,
    ResolverConfigurationError,
    SecretsAuthenticationError,
    SecretsClientError,
)
from infisical_run.models import ModelEnvResolverConfig, ModelProjectConfig
from infisical_run.runtime.env_resolver import EnvResolver, is_invocation_guard_set
from infisical_run.testing import InMemorySecretsClient

WriteFile = Callable[[str, str], Path]

TOKEN_ENV = {"INFISICAL_TOKEN": "shell-token", "INFISICAL_PROJECT_ID": "proj-1"}


def make_resolver(
    client: InMemorySecretsClient,
    **config: object,
) -> EnvResolver:
    return EnvResolver(
        ModelEnvResolverConfig(**config),
        secrets_client_factory=client.factory,
    )


class TestInvocationGuard:
    """Nested invocations launch with the inherited environment untouched."""

    def test_guard_detection(self) -> None:
        assert is_invocation_guard_set({"_INFISICAL_RUN": "true"})
        assert not is_invocation_guard_set({"_INFISICAL_RUN": ""})
        assert not is_invocation_guard_set({})

    def test_guard_short_circuits(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "FROM_DOTENV=1\n")
        shell = {"_INFISICAL_RUN": "true", "KEEP": "me"}

        result = make_resolver(secrets_client).resolve(shell)

        assert result.short_circuited
        assert result.environment.to_environ() == shell
        assert result.layers == ()
        assert secrets_client.factory_environs == []

    def test_guard_short_circuits_before_missing_extra_file(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        resolver = make_resolver(
            secrets_client, extra_dotenv_files=(Path("missing.env"),)
        )
        result = resolver.resolve({"_INFISICAL_RUN": "true"})
        assert result.short_circuited

    def test_guard_set_in_result(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(secrets_client, skip_secrets=True).resolve({})
        assert result.environment.get("_INFISICAL_RUN") == "true"

    def test_guard_set_without_keeping_shell_env(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(
            secrets_client, skip_secrets=True, keep_shell_env=False
        ).resolve({})
        assert result.environment.get("_INFISICAL_RUN") == "true"


class TestSkipDecision:
    @pytest.mark.parametrize(
        ("config", "shell", "expected"),
        [
            ({}, {}, False),
            ({"skip_secrets": True}, {}, True),
            ({}, {"_SECRETS_MANAGER_LOADED": "true"}, True),
            ({}, {"INFISICAL_LOADED": "1"}, True),
            ({}, {"INFISICAL_LOADED": "YES"}, True),
            ({}, {"INFISICAL_LOADED": "false"}, False),
            ({}, {"INFISICAL_LOADED": ""}, False),
            ({"force_secrets": True}, {"INFISICAL_LOADED": "true"}, False),
            ({"force_secrets": True, "skip_secrets": True}, {}, False),
        ],
    )
    def test_should_skip_secrets(
        self,
        secrets_client: InMemorySecretsClient,
        config: dict[str, object],
        shell: dict[str, str],
        expected: bool,
    ) -> None:
        resolver = make_resolver(secrets_client, **config)
        assert resolver.should_skip_secrets(shell) is expected

    def test_skipped_secrets_never_build_a_client(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(secrets_client, skip_secrets=True).resolve({})

        assert not result.secrets_loaded
        assert result.project is None
        assert secrets_client.factory_environs == []
        assert secrets_client.call_count == 0

    def test_loaded_indicator_skips_without_credentials(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(secrets_client).resolve({"INFISICAL_LOADED": "true"})
        assert not result.secrets_loaded

    def test_force_overrides_indicator(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.secrets = {"API_KEY": "secret"}
        result = make_resolver(secrets_client, force_secrets=True).resolve(
            {**TOKEN_ENV, "INFISICAL_LOADED": "true"}
        )
        assert result.secrets_loaded
        assert result.environment.get("API_KEY") == "secret"


class TestCredentials:
    def test_token_from_shell_skips_authentication(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        make_resolver(secrets_client).resolve(TOKEN_ENV)

        assert secrets_client.authenticate_calls == []
        assert secrets_client.fetch_calls == [("shell-token", "proj-1", "dev")]

    def test_client_credentials_obtain_token(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        shell = {
            "INFISICAL_CLIENT_ID": "id",
            "INFISICAL_CLIENT_SECRET": "secret",
            "INFISICAL_PROJECT_ID": "proj-1",
        }
        make_resolver(secrets_client).resolve(shell)

        assert secrets_client.authenticate_calls == [("id", "secret")]
        assert secrets_client.fetch_calls == [("in-memory-token", "proj-1", "dev")]

    def test_credentials_from_default_dotenv(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(
            ".env",
            "INFISICAL_CLIENT_ID=file-id\n"
            "INFISICAL_CLIENT_SECRET=file-secret\n"
            "INFISICAL_PROJECT_ID=file-proj\n",
        )
        make_resolver(secrets_client).resolve({})

        assert secrets_client.authenticate_calls == [("file-id", "file-secret")]
        assert secrets_client.fetch_calls[0][1] == "file-proj"

    def test_explicit_values_win_over_environment(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        shell = {
            "INFISICAL_CLIENT_ID": "env-id",
            "INFISICAL_CLIENT_SECRET": "env-secret",
            "INFISICAL_PROJECT_ID": "env-proj",
            "INFISICAL_ENVIRONMENT": "staging",
        }
        make_resolver(
            secrets_client,
            client_id=SecretStr("flag-id"),
            client_secret=SecretStr("flag-secret"),
            project_id="flag-proj",
            environment="prod",
        ).resolve(shell)

        assert secrets_client.authenticate_calls == [("flag-id", "flag-secret")]
        assert secrets_client.fetch_calls == [("in-memory-token", "flag-proj", "prod")]

    def test_explicit_token(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        make_resolver(
            secrets_client, token=SecretStr("flag-token"), project_id="p"
        ).resolve({"INFISICAL_TOKEN": "env-token"})
        assert secrets_client.fetch_calls == [("flag-token", "p", "dev")]

    def test_both_credentials_missing_reported_together(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(AuthenticationConfigurationError) as exc_info:
            make_resolver(secrets_client).resolve({"INFISICAL_PROJECT_ID": "p"})

        error = exc_info.value
        assert error.missing == ["INFISICAL_CLIENT_ID", "INFISICAL_CLIENT_SECRET"]
        assert "INFISICAL_CLIENT_ID" in error.message
        assert "INFISICAL_CLIENT_SECRET" in error.message
        assert "unable to authenticate" in error.message
        assert secrets_client.factory_environs == []

    def test_missing_client_secret(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(AuthenticationConfigurationError) as exc_info:
            make_resolver(secrets_client).resolve({"INFISICAL_CLIENT_ID": "id"})
        assert exc_info.value.missing == ["INFISICAL_CLIENT_SECRET"]

    def test_empty_value_counts_as_missing(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(AuthenticationConfigurationError):
            make_resolver(secrets_client).resolve(
                {"INFISICAL_CLIENT_ID": "", "INFISICAL_CLIENT_SECRET": "s"}
            )


class TestProjectIdentity:
    def test_missing_project_id(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(ResolverConfigurationError) as exc_info:
            make_resolver(secrets_client).resolve({"INFISICAL_TOKEN": "t"})

        assert "INFISICAL_PROJECT_ID" in exc_info.value.message
        assert exc_info.value.error_code is EnumResolverErrorCode.INVALID_CONFIGURATION
        assert secrets_client.fetch_calls == []

    def test_authentication_happens_before_project_check(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(ResolverConfigurationError):
            make_resolver(secrets_client).resolve(
                {"INFISICAL_CLIENT_ID": "id", "INFISICAL_CLIENT_SECRET": "s"}
            )
        assert secrets_client.authenticate_calls == [("id", "s")]

    def test_project_config_file_fills_gaps(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(
            ".infisical.json",
            json.dumps({"workspaceId": "ws-123", "defaultEnvironment": "staging"}),
        )
        result = make_resolver(secrets_client).resolve({"INFISICAL_TOKEN": "t"})

        assert secrets_client.fetch_calls == [("t", "ws-123", "staging")]
        assert result.project is not None
        assert result.project.project_id == "ws-123"

    def test_environment_falls_back_to_dev(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(secrets_client).resolve(TOKEN_ENV)
        assert result.project is not None
        assert result.project.environment_name == "dev"

    def test_environment_variable_beats_project_config(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".infisical.json", '{"defaultEnvironment": "staging"}')
        make_resolver(secrets_client).resolve(
            {**TOKEN_ENV, "INFISICAL_ENVIRONMENT": "prod"}
        )
        assert secrets_client.fetch_calls[0][2] == "prod"

    def test_project_config_not_read_when_identity_complete(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        loader = MagicMock(return_value=ModelProjectConfig())
        resolver = EnvResolver(
            ModelEnvResolverConfig(project_id="p", environment="e"),
            secrets_client_factory=secrets_client.factory,
            project_config_loader=loader,
        )
        resolver.resolve({"INFISICAL_TOKEN": "t"})
        loader.assert_not_called()


class TestDefaultDotenv:
    def test_absent_default_dotenv_is_ignored(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        result = make_resolver(secrets_client, skip_secrets=True).resolve({"A": "1"})
        assert result.environment.get("A") == "1"
        assert EnumVariableSource.DEFAULT_DOTENV_PRE not in result.layer_sources()

    def test_disabled_default_dotenv(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "FROM_DOTENV=1\n")
        result = make_resolver(
            secrets_client, skip_secrets=True, load_default_dotenv=False
        ).resolve({})
        assert "FROM_DOTENV" not in result.environment

    def test_default_dotenv_outranks_secrets(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "SHARED=from-dotenv\n")
        secrets_client.secrets = {"SHARED": "from-secrets", "ONLY_SECRET": "s"}

        result = make_resolver(secrets_client).resolve(TOKEN_ENV)

        assert result.environment.get("SHARED") == "from-dotenv"
        assert result.environment.get("ONLY_SECRET") == "s"
        assert result.layer_sources() == [
            EnumVariableSource.DEFAULT_DOTENV_PRE,
            EnumVariableSource.SECRETS,
            EnumVariableSource.DEFAULT_DOTENV_POST,
            EnumVariableSource.SHELL_SNAPSHOT,
        ]

    def test_single_default_pass_when_secrets_skipped(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "A=1\n")
        result = make_resolver(secrets_client, skip_secrets=True).resolve({})
        assert result.layer_sources() == [
            EnumVariableSource.DEFAULT_DOTENV_PRE,
            EnumVariableSource.SHELL_SNAPSHOT,
        ]

    def test_client_built_with_dotenv_settings(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "INFISICAL_API_URL=https://infisical.example.com\n")
        make_resolver(secrets_client).resolve(TOKEN_ENV)
        assert (
            secrets_client.factory_environs[0]["INFISICAL_API_URL"]
            == "https://infisical.example.com"
        )


class TestExtraDotenvFiles:
    def test_later_files_win(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file("a.env", "K=a\nONLY_A=a\n")
        write_file("b.env", "K=b\n")

        result = make_resolver(
            secrets_client,
            skip_secrets=True,
            extra_dotenv_files=(Path("a.env"), Path("b.env")),
        ).resolve({})

        assert result.environment.get("K") == "b"
        assert result.environment.get("ONLY_A") == "a"

    def test_extra_files_outrank_default_dotenv(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "K=default\n")
        write_file("other.env", "K=other\n")
        result = make_resolver(
            secrets_client, skip_secrets=True, extra_dotenv_files=(Path("other.env"),)
        ).resolve({})
        assert result.environment.get("K") == "other"

    def test_missing_extra_file_is_fatal(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(DotenvFileNotFoundError, match="missing.env"):
            make_resolver(
                secrets_client,
                skip_secrets=True,
                extra_dotenv_files=(Path("missing.env"),),
            ).resolve({})

    def test_extra_file_references_earlier_layers(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "HOST=db.internal\n")
        write_file("urls.env", "DATABASE_URL=postgres://${HOST}:5432/app\n")
        result = make_resolver(
            secrets_client, skip_secrets=True, extra_dotenv_files=(Path("urls.env"),)
        ).resolve({})
        assert result.environment.get("DATABASE_URL") == "postgres://db.internal:5432/app"


class TestKeepShellEnv:
    def test_shell_wins_by_default(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "K=dotenv\n")
        result = make_resolver(secrets_client, skip_secrets=True).resolve({"K": "shell"})
        assert result.environment.get("K") == "shell"

    def test_shell_loses_when_not_kept(
        self,
        workdir: Path,
        write_file: WriteFile,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        write_file(".env", "K=dotenv\n")
        result = make_resolver(
            secrets_client, skip_secrets=True, keep_shell_env=False
        ).resolve({"K": "shell", "UNTOUCHED": "shell"})

        assert result.environment.get("K") == "dotenv"
        assert result.environment.get("UNTOUCHED") == "shell"
        assert EnumVariableSource.SHELL_SNAPSHOT not in result.layer_sources()

    def test_shell_outranks_secrets(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.secrets = {"K": "secret"}
        result = make_resolver(secrets_client).resolve({**TOKEN_ENV, "K": "shell"})
        assert result.environment.get("K") == "shell"


class TestSecretsClientFailures:
    def test_client_errors_propagate(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.authenticate_error = SecretsAuthenticationError("denied")
        with pytest.raises(SecretsAuthenticationError, match="denied"):
            make_resolver(secrets_client).resolve(
                {"INFISICAL_CLIENT_ID": "id", "INFISICAL_CLIENT_SECRET": "s"}
            )

    def test_unexpected_errors_are_wrapped(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.fetch_error = ConnectionError("connection reset")
        with pytest.raises(SecretsClientError) as exc_info:
            make_resolver(secrets_client).resolve(TOKEN_ENV)

        assert "ConnectionError: connection reset" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_wrapped_errors_are_sanitized(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.fetch_error = RuntimeError("bad token abc123")
        with pytest.raises(SecretsClientError) as exc_info:
            make_resolver(secrets_client).resolve(TOKEN_ENV)
        assert "abc123" not in exc_info.value.message

    def test_errors_carry_invocation_correlation_id(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        secrets_client.fetch_error = ConnectionError("connection reset")
        with pytest.raises(SecretsClientError) as exc_info:
            make_resolver(secrets_client).resolve(TOKEN_ENV)

        detail = exc_info.value.model
        assert detail.correlation_id is not None
        assert detail.context["operation"] == "load_secrets"
        assert detail.context["source"] == EnumVariableSource.SECRETS

    def test_missing_credentials_carry_correlation_id(
        self,
        workdir: Path,
        secrets_client: InMemorySecretsClient,
    ) -> None:
        with pytest.raises(AuthenticationConfigurationError) as exc_info:
            make_resolver(secrets_client).resolve({})
        assert exc_info.value.model.correlation_id is not None
