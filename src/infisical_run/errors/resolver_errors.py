# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Resolver Error Classes.

Error Hierarchy:
    EnvResolverError (base resolver error)
    ├── ResolverConfigurationError
    │   └── AuthenticationConfigurationError
    ├── DotenvFileNotFoundError
    ├── SecretsClientError
    │   └── SecretsAuthenticationError
    └── ProcessLaunchError

All errors:
    - Carry an ``EnumResolverErrorCode`` classification
    - Support proper error chaining with ``raise ... from e``
    - Accept ``ModelResolverErrorContext`` for bundled context parameters
    - Expose a frozen ``ModelResolverErrorDetail`` via ``.model``
    - Are fatal: the CLI reports them and exits non-zero without launching
      the target command
"""

from __future__ import annotations

from typing import Optional

from infisical_run.enums import EnumResolverErrorCode
from infisical_run.errors.model_resolver_error_context import (
    ModelResolverErrorContext,
    ModelResolverErrorDetail,
)


class EnvResolverError(Exception):
    """Base error class for environment resolution failures.

    Structured Fields (via ModelResolverErrorContext):
        source: Variable layer being resolved
        operation: Operation being performed
        target_name: Target resource name
        correlation_id: Invocation correlation ID

    Example:
        >>> context = ModelResolverErrorContext(operation="resolve")
        >>> raise EnvResolverError("Resolution failed", context=context)
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumResolverErrorCode] = None,
        context: Optional[ModelResolverErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize EnvResolverError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled resolver context (source, operation, etc.)
            **extra_context: Additional context information
        """
        structured_context: dict[str, object] = dict(extra_context)

        correlation_id = None
        if context is not None:
            if context.source is not None:
                structured_context["source"] = context.source
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            correlation_id = context.correlation_id

        super().__init__(message)
        self.message = message
        self.model = ModelResolverErrorDetail(
            message=message,
            error_code=error_code or EnumResolverErrorCode.OPERATION_FAILED,
            correlation_id=correlation_id,
            context=structured_context,
        )

    @property
    def error_code(self) -> EnumResolverErrorCode:
        return self.model.error_code


class ResolverConfigurationError(EnvResolverError):
    """Raised when required configuration cannot be resolved.

    Used when the project ID is missing from the flags, the environment and
    the project config file while secrets loading is required.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelResolverErrorContext] = None,
        error_code: Optional[EnumResolverErrorCode] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or EnumResolverErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class AuthenticationConfigurationError(ResolverConfigurationError):
    """Raised when neither a token nor a complete machine identity is available.

    Example:
        >>> raise AuthenticationConfigurationError(
        ...     "no INFISICAL_TOKEN available, unable to authenticate to obtain a token",
        ...     missing=["INFISICAL_CLIENT_SECRET"],
        ... )
    """

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        context: Optional[ModelResolverErrorContext] = None,
        **extra_context: object,
    ) -> None:
        self.missing: list[str] = list(missing or [])
        extra_context["missing"] = self.missing
        super().__init__(
            message=message,
            error_code=EnumResolverErrorCode.AUTHENTICATION_CONFIGURATION,
            context=context,
            **extra_context,
        )


class DotenvFileNotFoundError(EnvResolverError):
    """Raised when an explicitly requested dotenv file does not exist.

    The default ``.env`` file never raises this; its absence is a silent no-op.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        context: Optional[ModelResolverErrorContext] = None,
        **extra_context: object,
    ) -> None:
        if path is not None:
            extra_context["path"] = path
        super().__init__(
            message=message,
            error_code=EnumResolverErrorCode.RESOURCE_NOT_FOUND,
            context=context,
            **extra_context,
        )


class SecretsClientError(EnvResolverError):
    """Raised when the secrets client fails.

    Used for a missing ``infisical`` executable or SDK package, non-zero exit
    codes, network failures and malformed responses. No partial secret set is
    ever applied once this is raised.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelResolverErrorContext] = None,
        error_code: Optional[EnumResolverErrorCode] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or EnumResolverErrorCode.SECRETS_SERVICE_ERROR,
            context=context,
            **extra_context,
        )


class SecretsAuthenticationError(SecretsClientError):
    """Raised when exchanging the machine identity for a token fails."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelResolverErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            error_code=EnumResolverErrorCode.AUTHENTICATION_ERROR,
            **extra_context,
        )


class ProcessLaunchError(EnvResolverError):
    """Raised when the target command cannot be executed.

    ``exit_code`` follows shell conventions: 127 when the command is not
    found, 126 when it is not executable.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        context: Optional[ModelResolverErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumResolverErrorCode.LAUNCH_FAILED,
            context=context,
            **extra_context,
        )
        self.exit_code = exit_code


__all__ = [
    "EnvResolverError",
    "ResolverConfigurationError",
    "AuthenticationConfigurationError",
    "DotenvFileNotFoundError",
    "SecretsClientError",
    "SecretsAuthenticationError",
    "ProcessLaunchError",
]
