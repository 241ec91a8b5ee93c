"""Error Hierarchy — typed, categorized exceptions for all BoothBoss failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are 4xx and recoverable; infrastructure errors are 5xx
    - to_response() produces the single REST error envelope used by every route
    - No internal details (SQL, SMTP transcripts, tokens) in user-facing messages

Design Decisions:
    - Single hierarchy rooted at BoothBossError: one global FastAPI handler renders all of it
    - ErrorContext as dataclass: carries user/event identifiers for logs without
      coupling to the logging framework
"""

from dataclasses import dataclass, field
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    event_url: str | None = None
    resource_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class BoothBossError(Exception):
    """Base exception for all BoothBoss errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "event_url": self.context.event_url,
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(BoothBossError):
    """Input failed a domain validation rule."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class AuthenticationError(BoothBossError):
    """Missing, invalid or expired credentials."""
    def __init__(
        self, message: str = "Invalid credentials",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class EmailNotVerifiedError(BoothBossError):
    """Login attempted before the email address was verified."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Please verify your email address before logging in",
            "EMAIL_NOT_VERIFIED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 403,
        )


class PermissionDeniedError(BoothBossError):
    """Actor is not allowed to perform the action on the resource."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Permission denied: {reason}",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.reason = reason


class QuotaExceededError(BoothBossError):
    """A subscription usage limit has been reached."""
    def __init__(
        self, limit_name: str, limit: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Subscription limit reached for {limit_name} ({limit})",
            "QUOTA_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.limit_name = limit_name
        self.limit = limit


class FeatureNotAvailableError(BoothBossError):
    """The subscription tier does not include the requested feature."""
    def __init__(self, feature: str, context: ErrorContext | None = None):
        super().__init__(
            f"Your subscription does not include '{feature}'",
            "FEATURE_NOT_AVAILABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.feature = feature


class ResourceNotFoundError(BoothBossError):
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


class ConflictError(BoothBossError):
    """Unique value already taken (email, username, URL path)."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.field = field


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(BoothBossError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StorageError(BoothBossError):
    """Media storage provider failed."""
    def __init__(
        self, message: str, provider: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Storage ({provider}) failed: {message}",
            "STORAGE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.provider = provider


class MailDeliveryError(BoothBossError):
    """SMTP delivery failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email delivery failed: {message}",
            "EMAIL_DELIVERY_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
