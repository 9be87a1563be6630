"""
Structured error types for stepback.

Every failure a migration run can produce is a ``StepbackError`` carrying a
category, optional structured context, and the chained underlying cause.
Callers receive exactly one of these from ``Migrator.migrate``; the progress
channel may additionally see rollback failures.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure kind of a run
    - **Rich Context:** Errors carry the migration, step and source path
    - **Error Chaining:** The operation's own exception is kept as ``cause``
    - **Never retried:** A failed step is not re-attempted at this layer

Architecture:
    ::

        StepbackError (category, retryable, context, cause)
        ├── SourceAccessError            SOURCE      file cannot be read
        ├── MissingMethodError           VALIDATION  name unknown to catalog
        ├── WrongMethodSignatureError    VALIDATION  method needs arguments
        ├── MethodInvocationFailedError  OPERATION   forward step failed
        │   └── RollbackFailedError      ROLLBACK    compensating step failed
        └── ConfigError                  CONFIG
            └── InvalidConfigError

Examples:
    >>> error = MissingMethodError("create_users_up")
    >>> str(error)
    'Non existing migrate method: create_users_up'
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>

    >>> try:
    ...     raise RuntimeError("table exists")
    ... except RuntimeError as e:
    ...     error = MethodInvocationFailedError("create_users_up", e)
    >>> error.cause
    RuntimeError('table exists')

Tags:
    error-handling, exception-hierarchy, error-context, stepback

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification and routing.

    Attributes:
        SOURCE: Migration file missing or unreadable
        VALIDATION: Unknown method name, unusable method signature
        OPERATION: A forward step raised
        ROLLBACK: A compensating step raised
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    SOURCE = "SOURCE"
    VALIDATION = "VALIDATION"
    OPERATION = "OPERATION"
    ROLLBACK = "ROLLBACK"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        migration: Migration file name (or ``"<memory>"``)
        step: Step (method) name involved
        source_path: Filesystem path that was being read
        metadata: Additional key-value pairs
    """

    migration: str | None = None
    step: str | None = None
    source_path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["migration", "step", "source_path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class StepbackError(Exception):
    """
    Base exception for all stepback errors.

    Subclasses set ``default_category`` and ``default_retryable``. Nothing in
    stepback retries on its own; ``retryable`` is there for callers that
    wrap a run in their own retry policy.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> StepbackError:
        """
        Add context to this error (fluent API).

        Usage:
            raise MissingMethodError("seed_up").with_context(migration="0001")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceAccessError(StepbackError):
    """The migration file could not be opened or read."""

    default_category = ErrorCategory.SOURCE

    def __init__(self, path: str, cause: BaseException | None = None):
        self.path = path
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Cannot read migration file {path}{reason}",
            context=ErrorContext(source_path=path),
            cause=cause,
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class MissingMethodError(StepbackError):
    """A listed method name is not recognised by the catalog.

    Raised while building the step list, before anything is invoked.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(self, method_name: str):
        self.method_name = method_name
        super().__init__(
            f"Non existing migrate method: {method_name}",
            context=ErrorContext(step=method_name),
        )


class WrongMethodSignatureError(StepbackError):
    """The named method exists but cannot be called without arguments."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, method_name: str):
        self.method_name = method_name
        super().__init__(
            f"Method {method_name} has wrong signature",
            context=ErrorContext(step=method_name),
        )


# =============================================================================
# INVOCATION ERRORS
# =============================================================================


class MethodInvocationFailedError(StepbackError):
    """A catalog operation raised while being invoked.

    ``method_name`` is the failing step, ``cause`` the operation's own
    exception.
    """

    default_category = ErrorCategory.OPERATION

    def __init__(self, method_name: str, cause: BaseException):
        self.method_name = method_name
        super().__init__(
            f"Method {method_name} returned an error: {cause}",
            context=ErrorContext(step=method_name),
            cause=cause,
        )


class RollbackFailedError(MethodInvocationFailedError):
    """A compensating step raised during rollback.

    Only ever delivered on the progress channel; the run still reports the
    forward failure that triggered the rollback.
    """

    default_category = ErrorCategory.ROLLBACK


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(StepbackError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


def is_retryable(error: BaseException) -> bool:
    """Return the error's ``retryable`` flag; unknown exceptions are not retryable."""
    if isinstance(error, StepbackError):
        return error.retryable
    return False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "StepbackError",
    "SourceAccessError",
    "MissingMethodError",
    "WrongMethodSignatureError",
    "MethodInvocationFailedError",
    "RollbackFailedError",
    "ConfigError",
    "InvalidConfigError",
    "is_retryable",
]
