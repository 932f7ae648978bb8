"""Custom exception hierarchy for FolderHub."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Folder errors
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    PARENT_FOLDER_NOT_FOUND = "PARENT_FOLDER_NOT_FOUND"
    FOLDER_ALREADY_EXISTS = "FOLDER_ALREADY_EXISTS"
    CIRCULAR_HIERARCHY = "CIRCULAR_HIERARCHY"

    # File errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    UPLOAD_NOT_FOUND = "UPLOAD_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PAGINATION = "INVALID_PAGINATION"
    INVALID_SORT = "INVALID_SORT"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FolderHubException(Exception):
    """
    Base exception for all FolderHub errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class FolderNotFoundError(FolderHubException):
    """Folder not found in database."""

    def __init__(self, folder_id: str):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class ParentFolderNotFoundError(FolderHubException):
    """The parent referenced by a create or move does not exist."""

    def __init__(self, parent_id: str):
        super().__init__(
            f"Parent folder not found: {parent_id}",
            ErrorCode.PARENT_FOLDER_NOT_FOUND,
            status_code=404,
            details={"parent_id": parent_id}
        )


class FileRecordNotFoundError(FolderHubException):
    """File not found in database."""

    def __init__(self, file_id: str):
        super().__init__(
            f"File not found: {file_id}",
            ErrorCode.FILE_NOT_FOUND,
            status_code=404,
            details={"file_id": file_id}
        )


class UploadNotFoundError(FolderHubException):
    """No progress entry is registered for this upload."""

    def __init__(self, upload_id: str):
        super().__init__(
            f"Upload not found: {upload_id}",
            ErrorCode.UPLOAD_NOT_FOUND,
            status_code=404,
            details={"upload_id": upload_id}
        )


class DuplicateFolderNameError(FolderHubException):
    """A sibling folder already uses this name."""

    def __init__(self, name: str, parent_id: Optional[str]):
        super().__init__(
            "A folder with this name already exists in the same location",
            ErrorCode.FOLDER_ALREADY_EXISTS,
            status_code=409,
            details={"name": name, "parent_id": parent_id}
        )


class ValidationError(FolderHubException):
    """Validation failed for user input."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            error_code,
            status_code=400,
            details=details
        )


class InvalidPaginationError(ValidationError):
    """page or limit outside the accepted range."""

    def __init__(self, message: str, field: str):
        super().__init__(message, field=field, error_code=ErrorCode.INVALID_PAGINATION)


class InvalidSortError(ValidationError):
    """sort_by or sort_order outside the enumerated values."""

    def __init__(self, message: str, field: str):
        super().__init__(message, field=field, error_code=ErrorCode.INVALID_SORT)


class CircularHierarchyError(ValidationError):
    """Moving a folder would make it its own ancestor."""

    def __init__(self, folder_id: str, parent_id: str):
        super().__init__(
            f"Cannot move folder {folder_id} into its own subtree ({parent_id})",
            field="parent_id",
            error_code=ErrorCode.CIRCULAR_HIERARCHY,
        )


class AuthenticationError(FolderHubException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class DatabaseError(FolderHubException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
