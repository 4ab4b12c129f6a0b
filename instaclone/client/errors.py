"""Normalize API and transport failures into one user-facing message."""

from __future__ import annotations

import enum
from typing import Optional

NETWORK_ERROR_MESSAGE = (
    "Please check your network connection. Your internet connection may be unstable."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred. Please try again in a moment."

STATUS_MESSAGES = {
    400: "The request was invalid.",
    401: "Please sign in to continue.",
    403: "You don't have permission to do that.",
    404: "The requested content could not be found.",
    500: "The server ran into a temporary problem.",
    503: "The service is temporarily unavailable.",
}


class ErrorKind(str, enum.Enum):
    NETWORK = "network_error"
    AUTH = "auth_error"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER = "server_error"
    UNKNOWN = "unknown_error"


def kind_for_status(status: Optional[int]) -> ErrorKind:
    if status is None:
        return ErrorKind.NETWORK
    if status == 401:
        return ErrorKind.AUTH
    if status == 403:
        return ErrorKind.FORBIDDEN
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 409:
        return ErrorKind.CONFLICT
    if 400 <= status < 500:
        return ErrorKind.VALIDATION
    if status >= 500:
        return ErrorKind.SERVER
    return ErrorKind.UNKNOWN


class ApiError(Exception):
    """A failed API call.

    `message` is the server's `error` string when the response carried one,
    otherwise a status-based fallback. `status` is None for transport failures.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.kind = kind or kind_for_status(status)

    @classmethod
    def from_status(cls, status: int, *, code: Optional[str] = None) -> "ApiError":
        message = STATUS_MESSAGES.get(status, f"A server error occurred. ({status})")
        return cls(message, status=status, code=code)

    @classmethod
    def network(cls) -> "ApiError":
        return cls(NETWORK_ERROR_MESSAGE, kind=ErrorKind.NETWORK)


def describe_error(error: BaseException) -> str:
    """Human-readable message for an alert/toast."""
    if isinstance(error, ApiError):
        if error.kind is ErrorKind.NETWORK:
            return NETWORK_ERROR_MESSAGE
        if error.kind is ErrorKind.AUTH:
            return STATUS_MESSAGES[401]
        if error.kind is ErrorKind.SERVER:
            return STATUS_MESSAGES.get(error.status, STATUS_MESSAGES[500])
        return error.message or STATUS_MESSAGES.get(error.status, UNKNOWN_ERROR_MESSAGE)
    return UNKNOWN_ERROR_MESSAGE
