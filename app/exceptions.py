# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every failure leaves the API as the same envelope:
#   {"success": false, "error": "<message>", "code": "<CODE>"}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MindLogException(Exception):
    """
    Base exception for the MindLog API.

    All custom exceptions inherit from this class. `details` is kept for
    logging only and never sent to the client.
    """

    def __init__(
        self,
        message: str,
        code: str = "MINDLOG_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API error envelope."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
        }


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(MindLogException):
    """Raised when the request carries no valid access token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )


class AuthorizationError(MindLogException):
    """Raised when an authenticated user lacks the required role."""

    def __init__(
        self,
        required_role: str,
        actual_role: str | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message=message or f"Only {required_role}s can perform this action",
            code="FORBIDDEN",
            status_code=403,
            details={"required_role": required_role, "actual_role": actual_role},
        )


class CheckInNotAllowedError(MindLogException):
    """Raised when a patient is not currently eligible to check in."""

    def __init__(self, reason: str | None = None):
        super().__init__(
            message=reason or (
                "You cannot check in. Make sure you are under follow-up with a "
                "doctor and have not already checked in today."
            ),
            code="CHECK_IN_NOT_ALLOWED",
            status_code=403,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class VideoValidationError(MindLogException):
    """Base class for rejected check-in uploads."""

    def __init__(self, message: str, code: str = "INVALID_VIDEO", details: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status_code=400, details=details)


class MissingVideoError(VideoValidationError):
    """Raised when the multipart form has no video field."""

    def __init__(self):
        super().__init__("No video file provided", code="MISSING_VIDEO")


class EmptyVideoError(VideoValidationError):
    """Raised when the uploaded video has no content."""

    def __init__(self, filename: str | None = None):
        super().__init__(
            "Video file is empty",
            code="EMPTY_VIDEO",
            details={"filename": filename},
        )


class VideoTooLargeError(VideoValidationError):
    """Raised when the uploaded video exceeds the size limit."""

    def __init__(self, size_bytes: int, max_bytes: int):
        max_mb = max_bytes // (1024 * 1024)
        super().__init__(
            f"File size exceeds {max_mb}MB limit",
            code="VIDEO_TOO_LARGE",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


class InvalidVideoTypeError(VideoValidationError):
    """Raised when the uploaded content type is not in the allow list."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            f"Unsupported video type: {content_type or '(none)'}. "
            f"Allowed types: {', '.join(allowed)}",
            code="INVALID_VIDEO_TYPE",
            details={"content_type": content_type, "allowed_types": allowed},
        )


# =============================================================================
# Analysis Exceptions
# =============================================================================

class AnalysisValidationError(MindLogException):
    """Raised when the model's output does not match the assessment schema."""

    def __init__(self, reason: str, raw_response: str | None = None):
        super().__init__(
            message=f"Invalid analysis response: {reason}",
            code="INVALID_ANALYSIS",
            status_code=400,
            details={"raw_response": (raw_response or "")[:500]},
        )
        self.reason = reason


class ProviderError(MindLogException):
    """Raised when the remote inference provider fails to upload, process, or generate."""

    def __init__(self, reason: str, code: str = "PROVIDER_ERROR", details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Analysis failed: {reason}",
            code=code,
            status_code=500,
            details=details,
        )
        self.reason = reason


class ProviderTimeoutError(ProviderError):
    """Raised when the uploaded file never leaves PROCESSING within the poll bounds."""

    def __init__(self, file_name: str, attempts: int, elapsed_seconds: float):
        super().__init__(
            f"Video processing timed out after {attempts} polls ({elapsed_seconds:.1f}s)",
            code="PROVIDER_TIMEOUT",
            details={"file_name": file_name, "attempts": attempts},
        )


class StagingError(MindLogException):
    """Raised when the video cannot be written to transient storage."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Analysis failed: could not stage video ({error})",
            code="STAGING_FAILED",
            status_code=500,
        )


class CleanupError(MindLogException):
    """
    Raised when a transient artifact cannot be deleted.

    Only ever raised and caught inside the cleanup helpers; it is logged and
    never reaches the client.
    """

    def __init__(self, target: str, error: str):
        super().__init__(
            message=f"Failed to delete {target}: {error}",
            code="CLEANUP_FAILED",
            status_code=500,
            details={"target": target},
        )


class PersistenceError(MindLogException):
    """Raised when the derived check-in record cannot be stored."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to save check-in: {error}",
            code="PERSISTENCE_ERROR",
            status_code=500,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def mindlog_exception_handler(
    request: Request,
    exc: MindLogException
) -> JSONResponse:
    """
    Convert MindLogException to the JSON error envelope.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message} {exc.details}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors (missing form fields, bad query params).

    A check-in posted without the `video` field lands here.
    """
    errors = getattr(exc, "errors", None)
    missing_video = False
    if callable(errors):
        missing_video = any(
            "video" in [str(part) for part in err.get("loc", ())]
            for err in errors()
        )

    if missing_video:
        return JSONResponse(status_code=400, content=MissingVideoError().to_dict())

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
        }
    )
