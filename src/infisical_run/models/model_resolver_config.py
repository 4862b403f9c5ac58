# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Environment Resolver Configuration Model.

Carries every input of one resolution run other than the inherited shell
environment: which layers to load, the explicit credentials and project
identity given on the command line, and the secrets backend.

Explicit values in this model win over the same settings found in the
environment (``INFISICAL_CLIENT_ID`` and friends). ``None`` means "not given on
the command line, look it up in the running environment".
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from infisical_run.enums import EnumSecretsBackend
from infisical_run.runtime.constants_env import (
    DEFAULT_DOTENV_FILE,
    PROJECT_CONFIG_FILE,
)


class ModelEnvResolverConfig(BaseModel):
    """Configuration for ``EnvResolver``.

    Attributes:
        keep_shell_env: Reapply the shell snapshot last so shell variables win.
        load_default_dotenv: Load the default dotenv file (silently skipped if absent).
        default_dotenv_path: Path of the default dotenv file.
        extra_dotenv_files: Additional dotenv files, applied in order.
        skip_secrets: Do not load secrets from Infisical.
        force_secrets: Load secrets even if skipped or already loaded.
        client_id: Machine identity client ID.
        client_secret: Machine identity client secret.
        token: Pre-obtained Infisical access token.
        project_id: Infisical project ID.
        environment: Infisical environment slug.
        project_config_path: Path of the local project config file.
        backend: Secrets client implementation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    keep_shell_env: bool = Field(
        default=True,
        description="Give shell variables the highest precedence.",
    )
    load_default_dotenv: bool = Field(
        default=True,
        description="Load the default dotenv file if it exists.",
    )
    default_dotenv_path: Path = Field(
        default=Path(DEFAULT_DOTENV_FILE),
        description="Path of the default dotenv file.",
    )
    extra_dotenv_files: tuple[Path, ...] = Field(
        default=(),
        description="Additional dotenv files in ascending precedence order.",
    )
    skip_secrets: bool = Field(
        default=False,
        description="Skip loading secrets from the secrets manager.",
    )
    force_secrets: bool = Field(
        default=False,
        description="Load secrets even when skipped or already loaded.",
    )
    client_id: Optional[SecretStr] = Field(
        default=None,
        description="Machine identity client ID.",
    )
    client_secret: Optional[SecretStr] = Field(
        default=None,
        description="Machine identity client secret.",
    )
    token: Optional[SecretStr] = Field(
        default=None,
        description="Pre-obtained access token.",
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Infisical project ID.",
    )
    environment: Optional[str] = Field(
        default=None,
        description="Infisical environment slug.",
    )
    project_config_path: Path = Field(
        default=Path(PROJECT_CONFIG_FILE),
        description="Path of the local project config file.",
    )
    backend: EnumSecretsBackend = Field(
        default=EnumSecretsBackend.CLI,
        description="Secrets client implementation.",
    )


__all__ = ["ModelEnvResolverConfig"]
