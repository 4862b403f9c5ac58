# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pydantic models for infisical-run.

Exports:
    ModelVariableSet: Immutable environment variable mapping with right-biased merge
    ModelProjectConfig: Fields read from ``.infisical.json``
    ModelProjectIdentity: Resolved (project_id, environment_name) pair
    ModelEnvResolverConfig: Inputs of one resolution run
    ModelResolvedLayer: One applied variable layer
    ModelResolutionResult: Final environment plus resolution trace
"""

from infisical_run.models.model_variable_set import ModelVariableSet
from infisical_run.models.model_project_identity import (
    ModelProjectConfig,
    ModelProjectIdentity,
)
from infisical_run.models.model_resolver_config import ModelEnvResolverConfig
from infisical_run.models.model_resolution_result import (
    ModelResolutionResult,
    ModelResolvedLayer,
)

__all__: list[str] = [
    "ModelEnvResolverConfig",
    "ModelProjectConfig",
    "ModelProjectIdentity",
    "ModelResolutionResult",
    "ModelResolvedLayer",
    "ModelVariableSet",
]
