"""
Custom exceptions for the interview generation API.

Every failure the pipeline can produce is one of the ``AppError`` subclasses
below. Each carries the HTTP status, the user-facing ``error`` label and the
underlying cause in ``details``, and knows how to render itself as the JSON
body the frontend expects (``{"success": false, "error": ..., "details": ...}``).
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from app.core.logger import CORRELATION_HEADER, get_correlation_id

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self, expose_diagnostics: bool = True) -> Dict[str, Any]:
        """Response body for this error. Diagnostic fields are dropped when not exposed."""
        return {"success": False, "error": self.error, "details": self.message}


class InvalidJSONError(AppError):
    """Raised when the request body is not valid JSON."""
    status_code = 400
    error = "Invalid JSON in request body"


class InvalidRequestStructureError(AppError):
    """Raised when the decoded body does not have the InterviewRequest shape."""
    status_code = 400
    error = "Invalid request body structure"

    def __init__(self, reasons: List[str], received: Any):
        self.reasons = reasons
        self.received = received
        super().__init__("; ".join(reasons), details={"reasons": reasons})

    def to_payload(self, expose_diagnostics: bool = True) -> Dict[str, Any]:
        payload = super().to_payload(expose_diagnostics)
        if expose_diagnostics:
            payload["received"] = self.received
        return payload


class ModelOutputErrorKind(str, Enum):
    INVALID_JSON = "invalid_json"
    NOT_AN_ARRAY = "not_an_array"
    NON_STRING_ITEMS = "non_string_items"


class ModelOutputError(AppError):
    """Raised when the model's text cannot be turned into a list of questions."""
    status_code = 500
    error = "Failed to process AI response"

    def __init__(self, message: str, kind: ModelOutputErrorKind, raw_response: str):
        self.kind = kind
        self.raw_response = raw_response
        super().__init__(message, details={"kind": kind.value})

    def to_payload(self, expose_diagnostics: bool = True) -> Dict[str, Any]:
        payload = super().to_payload(expose_diagnostics)
        if expose_diagnostics:
            payload["rawResponse"] = self.raw_response
        return payload


class ModelInvocationError(AppError):
    """Raised when the call to the generative model itself fails (network, quota, model error)."""


class StorageWriteError(AppError):
    """Raised when the interview record could not be written to Firestore."""

    def __init__(self, message: str, record: Optional[dict] = None):
        super().__init__(message, details={"record": record})


class InternalServerError(AppError):
    """Catch-all for failures that have no more specific variant."""


class ConfigurationError(AppError):
    """Exception raised when configuration is invalid or missing."""


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def app_error_handler(request: Request, exc: AppError):
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(level, f"{type(exc).__name__} ({exc.status_code}): {exc.message}")
    expose = getattr(request.app.state, "expose_diagnostics", True)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(expose_diagnostics=expose),
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    # Runs outside the correlation middleware, so the header is set here
    correlation_id = get_correlation_id()
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "details": str(exc) or "Unknown server error"},
        headers={CORRELATION_HEADER: correlation_id} if correlation_id else None,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
