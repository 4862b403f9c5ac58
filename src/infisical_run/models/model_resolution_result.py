# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Resolution result models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from infisical_run.enums import EnumVariableSource
from infisical_run.models.model_project_identity import ModelProjectIdentity
from infisical_run.models.model_variable_set import ModelVariableSet


class ModelResolvedLayer(BaseModel):
    """One layer applied during resolution.

    Only variable names are recorded, never values, so a layer can be logged.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: EnumVariableSource = Field(..., description="Layer kind.")
    origin: str = Field(..., description="File path, project or 'shell'.")
    keys: tuple[str, ...] = Field(default=(), description="Variable names applied.")


class ModelResolutionResult(BaseModel):
    """Outcome of ``EnvResolver.resolve``.

    Attributes:
        environment: Final merged Variable Set for the child process.
        layers: Layers in the order they were applied.
        short_circuited: True when the invocation guard was already set and
            nothing was resolved.
        secrets_loaded: True when secrets were fetched in this run.
        project: Project identity used for the fetch, when secrets were loaded.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    environment: ModelVariableSet = Field(..., description="Final environment.")
    layers: tuple[ModelResolvedLayer, ...] = Field(default=())
    short_circuited: bool = Field(default=False)
    secrets_loaded: bool = Field(default=False)
    project: Optional[ModelProjectIdentity] = Field(default=None)

    def layer_sources(self) -> list[EnumVariableSource]:
        """Sources of the applied layers, in application order."""
        return [layer.source for layer in self.layers]


__all__ = ["ModelResolutionResult", "ModelResolvedLayer"]
