"""Error Hierarchy — typed, categorized exceptions for coding-store failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are 400/404-level and recoverable; nothing here is raised by the
      lenient store itself — the HTTP shell raises them after strict reference checks
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with QualStoreError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: str | None = None
    code_id: str | None = None
    debug_info: dict[str, Any] | None = None


class QualStoreError(Exception):
    """Base exception for all coding-store errors."""

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
        body = {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "project_id": self.context.project_id,
                    "code_id": self.context.code_id,
                },
            }
        }
        details = {
            k: v for k, v in (self.context.debug_info or {}).items() if k != "error_code"
        }
        if details:
            body["error"]["details"] = details
        return body


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(QualStoreError):
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


class CodeNotFoundError(ResourceNotFoundError):
    """Apply/remove targeted a code that is not in the registry."""
    def __init__(self, code_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.code_id = code_id
        super().__init__("Code", code_id, ctx)
        self.code = "CODE_NOT_FOUND"


class InvalidReferenceError(QualStoreError):
    """A new entity references an id that does not exist (relation endpoint, parent, link)."""
    def __init__(
        self, message: str, error_code: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, error_code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class SnapshotFormatError(QualStoreError):
    """A store snapshot could not be decoded."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid snapshot: {message}",
            "SNAPSHOT_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
