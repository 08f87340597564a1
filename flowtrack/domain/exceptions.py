"""Domain exceptions for flowtrack.

Defines the engine's error taxonomy. Every exception carries a message,
a machine-readable error_code and a details dict; wrapped errors are chained
with ``raise ... from`` so the original cause stays reachable. The dashboard
maps them to HTTP responses in exception handlers.
"""

from typing import Any


class FlowTrackException(Exception):
    """Base exception for all flowtrack errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. operation, flow_name).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class FlowNotFoundException(FlowTrackException):
    """Raised when no ACTIVE flow matches (name, identifier)."""

    def __init__(self, flow_name: str, identifier: str | None = None) -> None:
        label = f"{flow_name} [{identifier}]" if identifier else flow_name
        super().__init__(
            f"flow: not found: {label}",
            "FLOW_NOT_FOUND",
            {"flow_name": flow_name, "identifier": identifier},
        )


class ResourceNotFoundException(FlowTrackException):
    """Raised when a dashboard lookup by id finds nothing."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class FlowSkippedException(FlowTrackException):
    """Raised when a caller requires tracking but the flow is a production-mode no-op."""

    def __init__(self, flow_name: str) -> None:
        super().__init__(
            f"flow: skipped (production mode): {flow_name}",
            "FLOW_SKIPPED",
            {"flow_name": flow_name},
        )


class LimitReachedException(FlowTrackException):
    """Raised when a caller requires tracking but the execution limit was hit."""

    def __init__(self, flow_name: str, max_executions: int | None = None) -> None:
        super().__init__(
            f"flow: execution limit reached: {flow_name}",
            "LIMIT_REACHED",
            {"flow_name": flow_name, "max_executions": max_executions},
        )


class StorageFailureException(FlowTrackException):
    """Wraps any persistence-layer error with the operation and flow name.

    The original error is available as ``__cause__`` (and via unwrap()).
    """

    def __init__(
        self, operation: str, flow_name: str | None, cause: BaseException
    ) -> None:
        """Initialize with the failing operation, flow name and cause.

        Args:
            operation: Engine operation that failed (e.g. 'start', 'finish').
            flow_name: Flow the operation ran against; may be None.
            cause: Underlying exception (SQLAlchemy error, timeout, ...).
        """
        if flow_name:
            message = f"flow.{operation} [{flow_name}]: {cause}"
        else:
            message = f"flow.{operation}: {cause}"
        super().__init__(
            message,
            "STORAGE_FAILURE",
            {"operation": operation, "flow_name": flow_name},
        )
        self.operation = operation
        self.flow_name = flow_name
        self.cause = cause


class SerializationException(FlowTrackException):
    """Raised when a point or assertion value cannot be converted to JSON."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            f"failed to serialize {field} value: {reason}",
            "SERIALIZATION_ERROR",
            {"field": field, "reason": reason},
        )


class ConfigurationException(FlowTrackException):
    """Raised when a client cannot be built from the given configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


def _chain(exc: BaseException | None):
    """Yield exc and every exception reachable through __cause__."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__


def is_not_found(exc: BaseException | None) -> bool:
    """Return True if exc is, or wraps, a FlowNotFoundException."""
    return any(isinstance(e, FlowNotFoundException) for e in _chain(exc))


def is_skipped(exc: BaseException | None) -> bool:
    """Return True if exc is, or wraps, a FlowSkippedException."""
    return any(isinstance(e, FlowSkippedException) for e in _chain(exc))


def is_limit_reached(exc: BaseException | None) -> bool:
    """Return True if exc is, or wraps, a LimitReachedException."""
    return any(isinstance(e, LimitReachedException) for e in _chain(exc))


def unwrap(exc: BaseException) -> BaseException:
    """Return the innermost cause of exc (exc itself when nothing is chained)."""
    innermost = exc
    for e in _chain(exc):
        innermost = e
    return innermost
