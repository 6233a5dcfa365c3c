"""Structured error handling: error categories, batch exceptions, and tagged error model."""

from __future__ import annotations

from enum import Enum

from google.api_core import exceptions as gexc
from google.auth.exceptions import GoogleAuthError
from pydantic import BaseModel, ValidationError


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    DIRECTORY_UNREADABLE = "DIRECTORY_UNREADABLE"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    CREDENTIALS_MISSING = "CREDENTIALS_MISSING"
    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    API_UNAVAILABLE = "API_UNAVAILABLE"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"
    OPERATION_TIMEOUT = "OPERATION_TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"
    UNKNOWN = "UNKNOWN"


_HINTS: dict[ErrorCategory, str] = {
    ErrorCategory.DIRECTORY_NOT_FOUND: "Input directory not found; check the path passed to labels-file",
    ErrorCategory.DIRECTORY_UNREADABLE: "Input directory cannot be listed; check permissions",
    ErrorCategory.FILE_UNREADABLE: "Video file could not be read; check permissions or remove it from the directory",
    ErrorCategory.CREDENTIALS_MISSING: (
        "No Google Cloud credentials; set GOOGLE_APPLICATION_CREDENTIALS "
        "or run 'gcloud auth application-default login'"
    ),
    ErrorCategory.API_PERMISSION_DENIED: "Credentials lack permission; enable the Video Intelligence API for the project",
    ErrorCategory.API_QUOTA_EXCEEDED: "Quota exhausted; wait and retry, or raise the project quota",
    ErrorCategory.API_INVALID_ARGUMENT: "Request rejected; the file is probably not a supported video",
    ErrorCategory.API_UNAVAILABLE: "Video Intelligence service unavailable; try again later",
    ErrorCategory.API_INVALID_RESPONSE: "Service returned a malformed label annotation; retry the file or report it",
    ErrorCategory.OPERATION_TIMEOUT: "Annotation did not finish in time; raise --timeout",
    ErrorCategory.NETWORK_ERROR: "Network failure talking to the service; check connectivity",
    ErrorCategory.CONFIG_INVALID: "Invalid configuration value; check VIDEO_LABELS_* variables and CLI options",
}


class LabelBatchError(Exception):
    """Base for failures raised by the batch pipeline.

    ``fatal`` errors abort the batch even when continue-on-error is enabled.
    """

    default_category: ErrorCategory = ErrorCategory.UNKNOWN
    fatal: bool = False

    def __init__(self, message: str, *, category: ErrorCategory | None = None) -> None:
        super().__init__(message)
        self.category = category or self.default_category


class DirectoryError(LabelBatchError):
    """Input directory missing, not a directory, or not listable."""

    default_category = ErrorCategory.DIRECTORY_NOT_FOUND
    fatal = True


class FileReadError(LabelBatchError):
    """One video file could not be read."""

    default_category = ErrorCategory.FILE_UNREADABLE


class AnnotationError(LabelBatchError):
    """The remote label-detection call failed for one file."""

    default_category = ErrorCategory.UNKNOWN


class BatchError(BaseModel):
    """Structured error attached to a failed file or batch."""

    error: str
    category: str
    hint: str
    retryable: bool = False


def categorize_error(error: BaseException) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, LabelBatchError):
        cat = error.category
        if cat == ErrorCategory.UNKNOWN and error.__cause__ is not None:
            return categorize_error(error.__cause__)
        return cat, _HINTS.get(cat, str(error))

    if isinstance(error, GoogleAuthError):
        cat = ErrorCategory.CREDENTIALS_MISSING
    elif isinstance(error, (gexc.PermissionDenied, gexc.Unauthenticated)):
        cat = ErrorCategory.API_PERMISSION_DENIED
    elif isinstance(error, (gexc.ResourceExhausted, gexc.TooManyRequests)):
        cat = ErrorCategory.API_QUOTA_EXCEEDED
    elif isinstance(error, (gexc.InvalidArgument, gexc.BadRequest)):
        cat = ErrorCategory.API_INVALID_ARGUMENT
    elif isinstance(error, (gexc.ServiceUnavailable, gexc.InternalServerError)):
        cat = ErrorCategory.API_UNAVAILABLE
    elif isinstance(error, (gexc.DeadlineExceeded, TimeoutError)):
        cat = ErrorCategory.OPERATION_TIMEOUT
    elif isinstance(error, FileNotFoundError):
        cat = ErrorCategory.DIRECTORY_NOT_FOUND
    elif isinstance(error, PermissionError):
        cat = ErrorCategory.FILE_UNREADABLE
    elif isinstance(error, ValidationError):
        cat = ErrorCategory.CONFIG_INVALID
    else:
        cat = _categorize_message(str(error))

    if cat == ErrorCategory.UNKNOWN:
        return cat, str(error)
    return cat, _HINTS[cat]


def _categorize_message(message: str) -> ErrorCategory:
    """Fallback classification on the error text."""
    s = message.lower()
    if "403" in s or "permission" in s:
        return ErrorCategory.API_PERMISSION_DENIED
    if "429" in s or "quota" in s or "resource_exhausted" in s:
        return ErrorCategory.API_QUOTA_EXCEEDED
    if "400" in s or "invalid argument" in s:
        return ErrorCategory.API_INVALID_ARGUMENT
    if "503" in s or "unavailable" in s:
        return ErrorCategory.API_UNAVAILABLE
    if "timeout" in s or "timed out" in s or "deadline" in s:
        return ErrorCategory.OPERATION_TIMEOUT
    if "connection" in s or "dns" in s or "socket" in s:
        return ErrorCategory.NETWORK_ERROR
    return ErrorCategory.UNKNOWN


def make_batch_error(error: BaseException) -> BatchError:
    """Create a tagged BatchError from an exception."""
    cat, hint = categorize_error(error)
    return BatchError(
        error=str(error),
        category=cat.value,
        hint=hint,
        retryable=cat in {
            ErrorCategory.API_QUOTA_EXCEEDED,
            ErrorCategory.API_UNAVAILABLE,
            ErrorCategory.NETWORK_ERROR,
        },
    )
