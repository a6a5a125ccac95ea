"""
Custom exceptions for the Knowledge Graph Engine.

Provides a hierarchy of exceptions for precise error handling across
all subsystems. All exceptions inherit from KGEngineError.

Exception Hierarchy:
    KGEngineError (base)
    ├── ConfigurationError
    ├── GraphError
    │   ├── InvalidFieldError
    │   ├── EntityNotFoundError
    │   │   └── EndpointNotFoundError
    │   └── NoPathError
    └── StorageError
        ├── MalformedLineError
        └── GraphFileError

Core graph operations report "not found" outcomes as result values.
The not-found exceptions exist for adapters that prefer to raise.
"""

from typing import Any


class KGEngineError(Exception):
    """
    Base exception for all Knowledge Graph Engine errors.

    All custom exceptions inherit from this class, allowing for
    catch-all handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(KGEngineError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - Setting values fail validation
    """

    pass


# =============================================================================
# Graph Errors
# =============================================================================


class GraphError(KGEngineError):
    """
    Base error for graph operations.

    Raised for general graph failures not covered by
    more specific subclasses.
    """

    pass


class InvalidFieldError(GraphError):
    """
    Error when an entity name or relation label is unusable.

    Raised when:
    - A field is empty after whitespace normalization
    - A field contains the '|' separator of the triple format
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class EntityNotFoundError(GraphError):
    """
    Error when a lookup yields no entity.

    Covers both an empty fuzzy match and a cancelled
    disambiguation.
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if query is not None:
            details["query"] = query
        super().__init__(message, details)
        self.query = query


class EndpointNotFoundError(EntityNotFoundError):
    """
    Error when a path endpoint cannot be resolved.

    The role attribute tells whether the source or the
    target failed.
    """

    def __init__(
        self,
        message: str,
        role: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["role"] = role
        super().__init__(message, query=query, details=details)
        self.role = role


class NoPathError(GraphError):
    """
    Error when no directed path connects two entities.

    Not a failure of the engine: the search completed and
    the answer is negative.
    """

    def __init__(
        self,
        message: str,
        source: str,
        target: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["source"] = source
        details["target"] = target
        super().__init__(message, details)
        self.source = source
        self.target = target


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(KGEngineError):
    """
    Base error for reading and writing graph files.
    """

    pass


class MalformedLineError(StorageError):
    """
    Error parsing a line of the triple format.

    Raised when:
    - The line does not contain exactly two '|' separators
    - A field is empty after normalization

    Loaders recover by skipping the line and counting it.
    """

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if line_number is not None:
            details["line_number"] = line_number
        if line is not None:
            details["line"] = line[:100] + \
                "..." if len(line) > 100 else line
        super().__init__(message, details)
        self.line = line
        self.line_number = line_number


class GraphFileError(StorageError):
    """
    Error opening, reading or writing a graph file.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Utility Functions
# =============================================================================


def is_not_found(error: Exception) -> bool:
    """
    Check if an error is a negative lookup result.

    Args:
        error: The exception to check

    Returns:
        True for missing entities, missing endpoints and missing paths
    """
    return isinstance(error, (EntityNotFoundError, NoPathError))
