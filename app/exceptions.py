# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a human-readable `detail` the admin panel shows as a
# toast, a machine-readable `code`, and where possible a `suggestion`.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class StorefrontException(Exception):
    """
    Base exception for the Storefront API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "STOREFRONT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Record Exceptions
# =============================================================================

class RecordNotFoundError(StorefrontException):
    """Raised when a row ID doesn't exist in a table."""

    def __init__(self, table: str, record_id: str):
        super().__init__(
            message=f"No {table} row with id {record_id}",
            code="RECORD_NOT_FOUND",
            status_code=404,
            suggestion="The row may have been deleted from another admin session; refresh the list",
            details={"table": table, "id": record_id}
        )


class StoreUnavailableError(StorefrontException):
    """Raised when the hosted store rejects or fails a request."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation}: {error}",
            code="STORE_UNAVAILABLE",
            status_code=502,
            suggestion="Try again in a moment; nothing was changed locally",
            details={"operation": operation}
        )


# =============================================================================
# Site Setting Exceptions
# =============================================================================

class SettingNotFoundError(StorefrontException):
    """Raised when a site setting key doesn't exist."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Site setting not found: {key}",
            code="SETTING_NOT_FOUND",
            status_code=404,
            suggestion="Create the setting from the admin panel first",
            details={"key": key}
        )


class InvalidSettingPathError(StorefrontException):
    """Raised when a nested edit path can't be applied to a setting value."""

    def __init__(self, path: list[str], error: str):
        super().__init__(
            message=f"Cannot edit {'.'.join(path) or '<root>'}: {error}",
            code="INVALID_SETTING_PATH",
            status_code=400,
            suggestion="Use a dotted path to an existing field, e.g. footer.social_links.facebook",
            details={"path": path}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidImageTypeError(StorefrontException):
    """Raised when the uploaded file isn't an image."""

    def __init__(self, filename: str, content_type: str | None):
        super().__init__(
            message="Invalid file type. Please select an image file.",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion="Upload a PNG, JPEG, WebP or GIF image",
            details={"filename": filename, "content_type": content_type}
        )


class ImageTooLargeError(StorefrontException):
    """Raised when the uploaded image exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB. Please select an image smaller than {max_mb}MB.",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class ImageDecodeError(StorefrontException):
    """Raised when the uploaded bytes can't be decoded as an image."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Could not read image {filename}: {error}",
            code="IMAGE_DECODE_ERROR",
            status_code=400,
            suggestion="Check that the file is a valid, uncorrupted image",
            details={"filename": filename}
        )


class ImageRelayError(StorefrontException):
    """Raised when transferring an image to the file server fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload image: {error}",
            code="IMAGE_RELAY_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Realtime Exceptions
# =============================================================================

class WebhookAuthError(StorefrontException):
    """Raised when a database webhook presents the wrong secret."""

    def __init__(self):
        super().__init__(
            message="Invalid webhook secret",
            code="WEBHOOK_UNAUTHORIZED",
            status_code=401,
            suggestion="Set the X-Webhook-Secret header to REALTIME_WEBHOOK_SECRET",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def storefront_exception_handler(
    request: Request,
    exc: StorefrontException
) -> JSONResponse:
    """
    Convert StorefrontException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors.

    Missing required form fields land here.
    """
    errors = jsonable_encoder(exc.errors()) if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )
