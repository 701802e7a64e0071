#!/usr/bin/env python3
"""Exception Hierarchy for NetBox resource reconciliation.

This module provides a structured exception hierarchy for handling errors
across the adapters, the HTTP client, and the reconciliation use cases.

Design Principles:
    - All exceptions inherit from NetBoxError base class
    - Exceptions preserve context (original error, timestamps, details)
    - Input errors are raised before any network call is made
    - Service errors are propagated unmodified (no retry, no compensation)

Exception Hierarchy:
    NetBoxError (base)
    ├── ConfigurationError (unrecoverable - fix config)
    ├── ValidationError (caller error - fix the record)
    │   ├── InvalidValueError
    │   └── UnknownReferenceError
    ├── AmbiguousFilterError (lookup matched more than one entity)
    └── ServiceError (transport or API failure)
        ├── APIError
        │   ├── NotFoundError
        │   ├── BadRequestError
        │   ├── AuthenticationError
        │   └── ServerError
        └── NetworkError
            ├── ConnectionError
            └── TimeoutError
"""
from datetime import datetime, timezone
from typing import Any, Optional

# ============================================
# Base Exception
# ============================================

class NetBoxError(Exception):
    """Base exception for all reconciliation errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "NOT_FOUND")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether retrying the whole cycle might succeed
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================
# Configuration Errors
# ============================================

class ConfigurationError(NetBoxError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.missing_keys = missing_keys or []


# ============================================
# Input Errors (raised before any network call)
# ============================================

class ValidationError(NetBoxError):
    """Raised when a declarative record or filter is invalid.

    Attributes:
        field: Name of the offending field, when known
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        kwargs.setdefault("code", "VALIDATION_ERROR")
        super().__init__(
            message,
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.field = field


class InvalidValueError(ValidationError):
    """Raised when an enum-valued field holds a value outside its allowed set."""

    def __init__(
        self,
        field: str,
        value: Any,
        allowed: Optional[list[str]] = None,
        **kwargs,
    ):
        message = f"invalid value {value!r} for {field}"
        details = kwargs.pop("details", {})
        details["value"] = value
        if allowed:
            details["allowed"] = list(allowed)
            message = f"{message}, expected one of: {', '.join(allowed)}"
        super().__init__(
            message,
            field=field,
            code="INVALID_VALUE",
            details=details,
            **kwargs,
        )
        self.value = value
        self.allowed = list(allowed or [])


class UnknownReferenceError(ValidationError):
    """Raised when a named reference (e.g., a tag) cannot be resolved."""

    def __init__(
        self,
        reference_type: str,
        names: list[str],
        **kwargs,
    ):
        message = f"could not find {reference_type}: {', '.join(names)}"
        details = kwargs.pop("details", {})
        details["reference_type"] = reference_type
        details["names"] = list(names)
        super().__init__(
            message,
            code="UNKNOWN_REFERENCE",
            details=details,
            **kwargs,
        )
        self.reference_type = reference_type
        self.names = list(names)


# ============================================
# Lookup Errors
# ============================================

class AmbiguousFilterError(NetBoxError):
    """Raised when a lookup filter matches more than one entity.

    Attributes:
        filters: The filter that matched too many entities
        count: Number of matches reported by the service
    """

    def __init__(
        self,
        message: str,
        filters: Optional[dict[str, Any]] = None,
        count: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if filters:
            details["filters"] = dict(filters)
        if count is not None:
            details["count"] = count
        super().__init__(
            message,
            code="AMBIGUOUS_FILTER",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.filters = dict(filters or {})
        self.count = count


# ============================================
# Service Errors
# ============================================

class ServiceError(NetBoxError):
    """Base class for transport and API-side failures.

    Service errors are surfaced to the caller exactly as raised; the caller
    decides whether to retry a whole reconciliation cycle.
    """


class APIError(ServiceError):
    """Base class for API response errors.

    Attributes:
        status_code: HTTP status code
        endpoint: API endpoint that was called
        response_body: Raw response body (may be truncated)
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        method: str = "GET",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        if method:
            details["method"] = method
        if response_body:
            details["response_body"] = response_body[:500] if len(response_body) > 500 else response_body

        kwargs.setdefault("recoverable", status_code in (429, 500, 502, 503, 504))
        kwargs.setdefault("code", f"API_ERROR_{status_code}")

        super().__init__(
            message,
            details=details,
            **kwargs,
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body
        self.method = method


class NotFoundError(APIError):
    """Raised when the requested entity does not exist (HTTP 404).

    Also raised by lookups whose filter matches no entity.
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs,
    ):
        if message is None:
            message = f"{resource_type} not found"
            if resource_id:
                message = f"{resource_type} '{resource_id}' not found"

        kwargs.setdefault("status_code", 404)
        details = kwargs.pop("details", {})
        details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message,
            code="NOT_FOUND",
            details=details,
            recoverable=False,
            **kwargs,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class BadRequestError(APIError):
    """Raised when the service rejects a payload (HTTP 400/422)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", 400)
        super().__init__(
            message,
            code="BAD_REQUEST",
            recoverable=False,
            **kwargs,
        )


class AuthenticationError(APIError):
    """Raised when the API token is missing, invalid, or lacks permission."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        kwargs.setdefault("status_code", 403)
        super().__init__(
            message,
            code="AUTHENTICATION_ERROR",
            recoverable=False,
            **kwargs,
        )


class ServerError(APIError):
    """Raised when server returns 5xx error."""

    def __init__(self, message: str = "Server error", **kwargs):
        kwargs.setdefault("status_code", 500)
        super().__init__(
            message,
            code="SERVER_ERROR",
            recoverable=True,
            **kwargs,
        )


class NetworkError(ServiceError):
    """Base class for network-related errors."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class ConnectionError(NetworkError):
    """Raised when connection to server fails."""

    def __init__(
        self,
        message: str = "Failed to connect to server",
        host: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if host:
            details["host"] = host
        super().__init__(
            message,
            code="CONNECTION_ERROR",
            details=details,
            **kwargs,
        )


class TimeoutError(NetworkError):
    """Raised when request times out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message,
            code="TIMEOUT_ERROR",
            details=details,
            **kwargs,
        )


__all__ = [
    "NetBoxError",
    "ConfigurationError",
    "ValidationError",
    "InvalidValueError",
    "UnknownReferenceError",
    "AmbiguousFilterError",
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
