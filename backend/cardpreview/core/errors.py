"""Error Hierarchy — typed, categorized exceptions for every caller-visible failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller-visible codes: BAD_REQUEST (400), NOT_FOUND (404), RENDER_FAILURE (500)
    - Best-effort fetch failures (photo, engagement count) never become errors here —
      they degrade locally to initials / zero
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with CardPreviewError base: one FastAPI handler catches all
    - DatabaseError and FontUnavailableError subclass RenderFailureError: from the
      caller's point of view the preview simply could not be produced
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    RENDER = "render"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    identifier: str | None = None
    card_id: str | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class CardPreviewError(Exception):
    """Base exception for all card preview errors."""

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
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidIdentifierError(CardPreviewError):
    """Identifier missing or malformed — rejected before any lookup."""
    def __init__(self, identifier: str | None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.identifier = identifier
        super().__init__(
            "Card identifier is missing or malformed",
            "BAD_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )


class CardNotFoundError(CardPreviewError):
    """Neither the slug nor the custom-domain fallback resolved to a card."""
    def __init__(self, identifier: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.identifier = identifier
        super().__init__(
            f"Card '{identifier}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )


# ─── Render Errors (500-level) ──────────────────────────────────

class RenderFailureError(CardPreviewError):
    """Layout, serialization or rasterization failed — no partial image is returned."""
    def __init__(
        self,
        message: str,
        stage: str,
        context: ErrorContext | None = None,
        category: ErrorCategory = ErrorCategory.RENDER,
    ):
        ctx = context or ErrorContext()
        ctx.stage = stage
        super().__init__(
            message, "RENDER_FAILURE", category,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.stage = stage


class DatabaseError(RenderFailureError):
    """Card store operation failed for a reason other than 'not found'."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "lookup", context, ErrorCategory.DATABASE,
        )
        self.operation = operation


class FontUnavailableError(RenderFailureError):
    """Font bytes could not be loaded and nothing is cached yet."""
    def __init__(self, family: str, weight: int, context: ErrorContext | None = None):
        super().__init__(
            f"Font {family} {weight} unavailable",
            "fonts", context, ErrorCategory.EXTERNAL_API,
        )
        self.family = family
        self.weight = weight
