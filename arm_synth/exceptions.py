"""
Custom Exception Hierarchy for arm-synth

This module provides the exception hierarchy used across the synthesis
pipeline. Every error carries structured context, an optional error code and
an optional recovery suggestion so callers can surface actionable messages.
"""

from typing import Any, Dict, List, Optional


class ArmSynthError(Exception):
    """
    Base exception class for all arm-synth errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Construct tree exceptions
class ConstructError(ArmSynthError):
    """Raised when the construct tree is built incorrectly."""

    def __init__(
        self, message: str, construct_path: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if construct_path:
            context["construct_path"] = construct_path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONSTRUCT_TREE")
        super().__init__(message, **kwargs)


# Synthesis exceptions
class TransformationError(ArmSynthError):
    """Raised when a construct cannot be turned into a canonical record."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        field_path: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if resource_type:
            context["resource_type"] = resource_type
        if field_path:
            context["field_path"] = field_path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "TRANSFORMATION_FAILED")
        super().__init__(message, **kwargs)


class DependencyResolutionError(ArmSynthError):
    """Base class for dependency graph errors."""

    pass


class CircularDependencyError(DependencyResolutionError):
    """Raised when the dependency graph contains a cycle.

    The message names every node key on the cycle, starting and ending with
    the first repeated node, in traversal order.
    """

    def __init__(self, cycle: List[str], **kwargs: Any) -> None:
        self.cycle = list(cycle)
        kwargs.setdefault("error_code", "CIRCULAR_DEPENDENCY")
        kwargs.setdefault(
            "recovery_suggestion",
            "Remove one of the references or explicit dependencies on the cycle",
        )
        super().__init__(
            f"Circular dependency detected: {' → '.join(self.cycle)}", **kwargs
        )


# Configuration-related exceptions
class ConfigurationError(ArmSynthError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(
        self, message: str, config_section: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if config_section:
            context["config_section"] = config_section
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check configuration file and environment variables"
        )
        super().__init__(message, **kwargs)


# Validation-related exceptions
class ValidationError(ArmSynthError):
    """Base class for validation errors."""

    pass


class ShapeValidationError(ValidationError, TypeError):
    """Raised by the assert helpers when a nested ARM structure is malformed."""

    def __init__(
        self, message: str, field_path: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if field_path:
            context["field_path"] = field_path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "MALFORMED_ARM_STRUCTURE")
        super().__init__(message, **kwargs)
