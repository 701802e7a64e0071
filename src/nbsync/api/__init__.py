"""NetBox API modules.

This package provides the HTTP client and the exception hierarchy used by
the reconciliation adapters.

Classes:
    NetBoxClient: Async HTTP client with token authentication

Exceptions:
    NetBoxError: Base exception for all errors
    ConfigurationError: Missing or invalid configuration
    ValidationError: Invalid record or filter (raised before any network call)
    InvalidValueError: Value outside an allowed set
    UnknownReferenceError: Unresolvable reference such as a tag name
    AmbiguousFilterError: Lookup matched more than one entity
    ServiceError: Transport or API failure
    NotFoundError: Entity does not exist (HTTP 404, or lookup without match)
"""
from .client import NetBoxClient
from .exceptions import (
    AmbiguousFilterError,
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ConnectionError,
    InvalidValueError,
    NetBoxError,
    NetworkError,
    NotFoundError,
    ServerError,
    ServiceError,
    TimeoutError,
    UnknownReferenceError,
    ValidationError,
)

__all__ = [
    # Client
    "NetBoxClient",
    # Exceptions - Base
    "NetBoxError",
    "ConfigurationError",
    # Exceptions - Input
    "ValidationError",
    "InvalidValueError",
    "UnknownReferenceError",
    # Exceptions - Lookup
    "AmbiguousFilterError",
    # Exceptions - Service
    "ServiceError",
    "APIError",
    "NotFoundError",
    "BadRequestError",
    "AuthenticationError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
]
