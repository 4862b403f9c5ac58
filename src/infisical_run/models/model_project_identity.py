# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Project identity models.

``ModelProjectConfig`` is what a local ``.infisical.json`` file provides;
both fields are optional because the file may be missing or partial.
``ModelProjectIdentity`` is the fully resolved pair used to fetch secrets.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ModelProjectConfig(BaseModel):
    """Fields read from the local project config file.

    Attributes:
        workspace_id: Infisical project ID (``workspaceId`` in the file).
        default_environment: Default environment slug (``defaultEnvironment``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    workspace_id: Optional[str] = Field(
        default=None,
        description="Infisical project ID from the 'workspaceId' field.",
    )
    default_environment: Optional[str] = Field(
        default=None,
        description="Environment slug from the 'defaultEnvironment' field.",
    )


class ModelProjectIdentity(BaseModel):
    """Resolved project ID and environment name for a secrets fetch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_id: str = Field(..., min_length=1, description="Infisical project ID.")
    environment_name: str = Field(
        ...,
        min_length=1,
        description="Infisical environment slug.",
    )


__all__ = ["ModelProjectConfig", "ModelProjectIdentity"]
