"""
Exception hierarchy for attribute declaration and access.

Every error raised by cattri derives from CattriError so callers can catch
library failures with a single except clause. Declaration-time errors abort
class creation; access-time errors surface at the offending read or write.
Access-time errors (final, readonly, visibility) are also AttributeErrors, so
`hasattr` and `getattr(obj, name, default)` treat a refused read as missing.
"""

from typing import Any


class CattriError(Exception):
    """
    Base exception for all cattri errors.

    Example:
        try:
            Config.version = "2.0"
        except CattriError as e:
            lg.error(f"attribute error: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ValidationError(CattriError):
    """
    Malformed declaration.

    Examples:
        - Unknown option key
        - Scope, exposure or visibility outside its enumeration
        - Name that is not an identifier or ends with the predicate suffix
    """

    pass


class AttributeAlreadyDefinedError(CattriError):
    """Raised when a name is declared twice on the same type."""

    def __init__(self, name: str, **context: Any) -> None:
        self.name = name
        super().__init__(f"Attribute '{name}' has already been defined", **context)


class AttributeNotDefinedError(CattriError):
    """Raised when referring to an attribute that was never declared."""

    def __init__(self, name: str, **context: Any) -> None:
        self.name = name
        super().__init__(f"Attribute '{name}' has not been defined", **context)


class FinalAttributeError(CattriError, AttributeError):
    """
    Write-once violation.

    Raised when writing to a locked value, or when reading a final attribute
    that was never assigned.
    """

    pass


class ReadonlyAttributeError(CattriError, AttributeError):
    """Raised when assigning to an attribute whose exposure forbids writing."""

    pass


class MethodAlreadyDefinedError(CattriError):
    """Raised when an accessor would overwrite a method it did not install."""

    def __init__(self, name: str, target: type, **context: Any) -> None:
        self.name = name
        self.target = target
        super().__init__(
            f"Method '{name}' is already defined on {target.__qualname__}", **context
        )


class DuplicationError(CattriError):
    """Raised when copying an inherited value fails for an unexpected reason."""

    pass


class AttributeDefinitionError(CattriError):
    """Raised when accessor generation fails; the original error is chained."""

    pass


class EvaluationError(CattriError):
    """Raised when a default provider or a transformer raises."""

    pass


class VisibilityError(CattriError, AttributeError):
    """Raised when a protected or private accessor is used from outside."""

    pass
