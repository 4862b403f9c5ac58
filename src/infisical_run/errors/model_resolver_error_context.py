# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Resolver Error Context Models.

This module defines the configuration model for resolver error context,
bundling the common structured fields so error ``__init__`` signatures stay
short, and the detail model exposed on every raised error.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from infisical_run.enums import EnumResolverErrorCode, EnumVariableSource


class ModelResolverErrorContext(BaseModel):
    """Configuration model for resolver error context.

    Attributes:
        source: Variable layer being resolved when the error occurred
        operation: Operation being performed (authenticate, fetch_secrets, load_dotenv, ...)
        target_name: Target resource (file path, executable, service host)
        correlation_id: Correlation ID shared by all log lines of one invocation

    Example:
        >>> context = ModelResolverErrorContext(
        ...     source=EnumVariableSource.EXTRA_DOTENV,
        ...     operation="load_dotenv",
        ...     target_name="config/.env.local",
        ... )
        >>> raise DotenvFileNotFoundError("requested dotenv file not found", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    source: Optional[EnumVariableSource] = Field(
        default=None,
        description="Variable layer being resolved",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource name (path, executable, host)",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Correlation ID of the invocation",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: UUID | None = None,
        **kwargs: object,
    ) -> ModelResolverErrorContext:
        """Build a context, generating a correlation ID when none is given."""
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)  # type: ignore[arg-type]


class ModelResolverErrorDetail(BaseModel):
    """Structured view of a raised resolver error."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = Field(..., description="Human-readable error message")
    error_code: EnumResolverErrorCode = Field(..., description="Error classification")
    correlation_id: Optional[UUID] = Field(default=None)
    context: dict[str, object] = Field(default_factory=dict)


__all__ = ["ModelResolverErrorContext", "ModelResolverErrorDetail"]
