"""
Custom Exception Classes for the Application
Provides a unified error handling system with proper HTTP status codes and messages.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class AppException(HTTPException):
    """
    Base exception class for all application exceptions.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "error_code": error_code,
                "message": message,
                "details": self.details,
            },
            headers=headers,
        )


# ==================== Authentication Exceptions ====================


class AuthenticationException(AppException):
    """Raised when the caller presents no usable identity."""

    def __init__(
        self,
        error_code: str = "unauthorized",
        message: str = "Unauthorized",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            message=message,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenException(AuthenticationException):
    """Raised when the bearer token fails verification."""

    def __init__(self):
        super().__init__(
            error_code="invalid_token",
            message="Invalid authentication token",
        )


# ==================== Authorization Exceptions ====================


class OwnershipRequiredException(AppException):
    """Raised when the acting user does not own the resource being mutated."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="forbidden",
            message=message,
        )


# ==================== Resource Exceptions ====================


class ResourceNotFoundException(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Optional[Any] = None):
        details = {}
        if identifier is not None:
            details["identifier"] = str(identifier)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="resource_not_found",
            message=f"{resource} not found",
            details=details,
        )


class UserNotProvisionedException(AppException):
    """Raised when a verified identity has no matching row in the users table."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="user_not_found",
            message="User not found in database",
        )


# ==================== Validation Exceptions ====================


class ValidationException(AppException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "validation_error",
    ):
        details = {}
        if field:
            details["field"] = field

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details,
        )


class MissingFieldException(ValidationException):
    """Raised when a required request field is absent or blank."""

    def __init__(self, field: str):
        super().__init__(message=f"{field} is required", field=field)


class InvalidFileTypeException(ValidationException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, allowed_types: Optional[list] = None):
        super().__init__(
            message="Invalid file type. Only JPEG, PNG and WebP images are allowed",
            field="image",
            error_code="invalid_file_type",
        )
        if allowed_types:
            self.details["allowed_types"] = sorted(allowed_types)


class FileSizeLimitException(ValidationException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, max_size: Optional[int] = None):
        super().__init__(
            message="File size exceeds the 5MB limit",
            field="image",
            error_code="file_too_large",
        )
        if max_size:
            self.details["max_size"] = max_size


class CaptionTooLongException(ValidationException):
    def __init__(self, max_length: int):
        super().__init__(
            message=f"Caption must be {max_length} characters or less",
            field="caption",
            error_code="caption_too_long",
        )
        self.details["max_length"] = max_length


class EmptyContentException(ValidationException):
    def __init__(self):
        super().__init__(
            message="Comment content cannot be empty",
            field="content",
            error_code="empty_content",
        )


class SelfFollowException(ValidationException):
    def __init__(self):
        super().__init__(
            message="Cannot follow yourself",
            field="followingId",
            error_code="self_follow",
        )


# ==================== Conflict Exceptions ====================


class AlreadyFollowingException(AppException):
    """Raised when a follow row for the pair already exists."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="already_following",
            message="Already following this user",
        )


class AlreadyLikedException(AppException):
    """Raised when the store reports a uniqueness violation on the like pair."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="already_liked",
            message="Already liked",
        )


# ==================== Infrastructure Exceptions ====================


class StoreUnavailableException(AppException):
    """Raised when a store operation fails for reasons other than a lookup miss."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="database_error",
            message=message,
        )


class FileStoreException(AppException):
    """Raised when the file store rejects an upload."""

    def __init__(self, message: str = "Failed to upload image"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="file_store_error",
            message=message,
        )

