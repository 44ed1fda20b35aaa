"""Error Hierarchy — typed, categorized exceptions for all shelter failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ConnectivityError is the only transient error; everything else is permanent
    - DomainError subclasses (400-level) are recoverable and never retried
    - InternalError carries no detail of the upstream failure that caused it
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with ShelterError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - ConcurrencyError outside DomainError: a lost CAS race is not the caller's fault
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    cat_id: str | None = None
    upstream: str | None = None
    debug_info: dict[str, Any] | None = None


class ShelterError(Exception):
    """Base exception for all shelter errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "cat_id": self.context.cat_id,
                },
            }
        }


# ─── Domain Errors (400-level, permanent) ───────────────────────

class DomainError(ShelterError):
    """Permanent failure: retrying the same call cannot help."""


class AuthorizationError(DomainError):
    """Session token rejected by the authorization service."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Session is invalid or expired",
            "AUTHORIZATION_FAILED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class NotFoundError(DomainError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ValidationError(DomainError):
    """Request rejected as invalid (unknown breed, malformed upstream request)."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


# ─── Conflict (409) ─────────────────────────────────────────────

class ConcurrencyError(ShelterError):
    """Concurrent modification detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ConnectivityError(ShelterError):
    """Upstream unreachable. Transient: a retry may succeed."""
    def __init__(self, upstream: str, message: str, context: ErrorContext | None = None):
        ctx = replace(context, upstream=upstream) if context else ErrorContext(upstream=upstream)
        super().__init__(
            f"{upstream} unreachable: {message}",
            "UPSTREAM_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, ctx, 503,
        )
        self.upstream = upstream


class DatabaseError(ShelterError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class InternalError(ShelterError):
    """Operation failed for infrastructure reasons; no partial result."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Internal error, try again later",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
