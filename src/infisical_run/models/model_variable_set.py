# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Variable Set Model.

A Variable Set is a mapping from environment variable name to string value.
Sets are combined by right-biased overwrite: a later set replaces the values
of an earlier one for the keys it defines and leaves every other key alone.

The resolver threads a single Variable Set through every resolution step and
only materializes it into a real process environment at launch time, so each
merge is visible and testable in isolation.

Example:
    >>> base = ModelVariableSet.from_mapping({"A": "1", "B": "2"})
    >>> merged = base.merged_with(ModelVariableSet.from_mapping({"B": "3"}))
    >>> merged.to_environ()
    {'A': '1', 'B': '3'}
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelVariableSet(BaseModel):
    """Immutable name-to-value mapping of environment variables.

    Attributes:
        variables: Variable names mapped to their values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variable names mapped to values.",
    )

    @field_validator("variables")
    @classmethod
    def validate_variable_names(cls, value: dict[str, str]) -> dict[str, str]:
        if any(not name for name in value):
            raise ValueError("variable names must be non-empty")
        return value

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str] | None = None) -> ModelVariableSet:
        """Build a Variable Set from any string mapping, copying it."""
        return cls(variables=dict(mapping or {}))

    def merged_with(self, other: ModelVariableSet | Mapping[str, str]) -> ModelVariableSet:
        """Return a new set with ``other`` written over this one."""
        overlay = other.variables if isinstance(other, ModelVariableSet) else other
        return ModelVariableSet(variables={**self.variables, **overlay})

    def with_variable(self, name: str, value: str) -> ModelVariableSet:
        """Return a new set with a single variable set."""
        return self.merged_with({name: value})

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.variables.get(name, default)

    def keys(self) -> list[str]:
        return list(self.variables)

    def to_environ(self) -> dict[str, str]:
        """Return a plain dict copy suitable for ``os.execvpe``/``subprocess``."""
        return dict(self.variables)

    def __contains__(self, name: object) -> bool:
        return name in self.variables

    def __len__(self) -> int:
        return len(self.variables)


__all__ = ["ModelVariableSet"]
