"""Custom exceptions for the Pipedash application."""


class PipedashError(Exception):
    """Base exception for Pipedash application."""

    pass


class ValidationError(PipedashError):
    """Raised when validation fails."""

    pass


class NotFoundError(PipedashError):
    """Raised when a resource is not found."""

    pass


class DatabaseError(PipedashError):
    """Raised when a database operation fails."""

    pass


class ServiceError(PipedashError):
    """Raised when a service operation fails."""

    pass


class ConfigurationError(PipedashError):
    """Raised when configuration is invalid."""

    pass


class FileRejectedError(PipedashError):
    """Raised when an uploaded file fails the type/size/encoding gate."""

    def __init__(self, message: str, reason: str = "format") -> None:
        super().__init__(message)
        self.reason = reason


class InvalidTransitionError(PipedashError, ValueError):
    """Raised when a disallowed state transition is attempted."""

    pass


class MappingIncompleteError(PipedashError):
    """Raised when required target fields are neither mapped nor auto-filled."""

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(f"Required fields not mapped: {', '.join(missing_fields)}")
        self.missing_fields = missing_fields


class RestoreError(PipedashError):
    """Raised when a backup document cannot be read."""

    pass
