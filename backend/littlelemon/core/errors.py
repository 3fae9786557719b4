"""Error Hierarchy: typed, categorized failures for the menu cache.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Sync failures (network, decode, persistence) never reach the UI as blocking errors;
      the orchestrator resolves them to the FAILED state and keeps the last snapshot
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with MenuCacheError base: one global handler catches all
    - Failures are values on the fetch path (FetchResult.failure) and exceptions on
      the persistence path; both carry the same types so callers log them uniformly
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
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sync_id: str | None = None
    url: str | None = None
    status_code: int | None = None
    debug_info: dict[str, Any] | None = None


class MenuCacheError(Exception):
    """Base exception for all menu cache errors."""

    # Seconds a client should wait before retrying; None when retrying won't help
    retry_after: int | None = None

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
                **self._context_fields(),
            }
        }

    def _context_fields(self) -> dict:
        fields = {
            "sync_id": self.context.sync_id,
            "upstream_status": self.context.status_code,
        }
        fields = {k: v for k, v in fields.items() if v is not None}
        return {"context": fields} if fields else {}


# ─── Sync Failures ──────────────────────────────────────────────

class NetworkFailure(MenuCacheError):
    """Remote catalog unreachable, returned a non-2xx status, or timed out."""
    def __init__(
        self,
        message: str,
        timed_out: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Menu fetch failed: {message}",
            "NETWORK_FAILURE",
            ErrorCategory.TIMEOUT if timed_out else ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 503,
        )
        self.timed_out = timed_out


class DecodeFailure(MenuCacheError):
    """Remote payload malformed or not matching the catalog schema."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Menu payload could not be decoded: {message}",
            "DECODE_FAILURE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 502,
        )


class PersistenceFailure(MenuCacheError):
    """Replace-all or clear transaction could not commit."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Menu store {operation} failed: {message}",
            "PERSISTENCE_FAILURE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(MenuCacheError):
    """Database session operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class RuntimeNotReadyError(MenuCacheError):
    """Cache runtime accessed before startup or after shutdown."""

    retry_after = 5

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Menu cache is not initialized",
            "RUNTIME_NOT_READY", ErrorCategory.INTERNAL,
            ErrorSeverity.WARNING, context, 503,
        )
