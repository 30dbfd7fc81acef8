"""Error Hierarchy — typed, categorized exceptions for all TruckEst failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status it maps to
    - to_response() produces the REST envelope: {"success": false, "message", "error"}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TruckEstError base: one global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    job_id: str | None = None
    vin: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TruckEstError(Exception):
    """Base exception for all TruckEst errors."""

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
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidRequestError(TruckEstError):
    """Request is well-formed JSON but semantically invalid."""
    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class InvalidVinError(TruckEstError):
    """VIN is missing, has the wrong length, or contains illegal characters."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_VIN", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class VinDecodeRejectedError(TruckEstError):
    """Registry answered but refused to decode the VIN."""
    def __init__(self, message: str, registry_code: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VIN_DECODE_REJECTED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.registry_code = registry_code


class AuthenticationError(TruckEstError):
    """Caller identity missing or credentials rejected."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(TruckEstError):
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


class VehicleDataNotFoundError(TruckEstError):
    """Registry returned no usable vehicle for the VIN."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VEHICLE_DATA_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class ConflictError(TruckEstError):
    """Unique constraint would be violated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class UploadTooLargeError(TruckEstError):
    """Uploaded file exceeds the configured size cap."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"File exceeds the {limit_bytes // (1024 * 1024)}MB upload limit",
            "UPLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit_bytes = limit_bytes


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TruckEstError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class DatabaseUnavailableError(TruckEstError):
    """No usable database: not configured, driver missing, or server unreachable."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Database not available",
            "DATABASE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 501,
        )


class VehicleRegistryError(TruckEstError):
    """Outbound vehicle registry call failed."""
    def __init__(
        self, message: str, error_type: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Vehicle registry error ({error_type}): {message}",
            "VEHICLE_REGISTRY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.error_type = error_type
