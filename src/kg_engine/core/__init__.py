"""
Core module for Knowledge Graph Engine.

Contains the exception hierarchy used throughout the application.
"""

from kg_engine.core.exceptions import (
    KGEngineError,
    ConfigurationError,
    GraphError,
    InvalidFieldError,
    EntityNotFoundError,
    EndpointNotFoundError,
    NoPathError,
    StorageError,
    MalformedLineError,
    GraphFileError,
    is_not_found,
)

__all__ = [
    # Base
    "KGEngineError",
    "ConfigurationError",
    # Graph
    "GraphError",
    "InvalidFieldError",
    "EntityNotFoundError",
    "EndpointNotFoundError",
    "NoPathError",
    # Storage
    "StorageError",
    "MalformedLineError",
    "GraphFileError",
    # Helpers
    "is_not_found",
]
