from __future__ import annotations

from portal.schemas.enums import ErrorCode


class PortalError(Exception):
    """Base exception for all staff portal client errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class UnauthenticatedError(PortalError):
    error_code = ErrorCode.UNAUTHENTICATED


class SessionExpiredError(PortalError):
    error_code = ErrorCode.SESSION_EXPIRED


class LoginError(PortalError):
    error_code = ErrorCode.LOGIN_FAILED


class InvalidInputError(PortalError):
    error_code = ErrorCode.INVALID_INPUT


class ApiError(PortalError):
    error_code = ErrorCode.API_ERROR

    def __init__(
        self, message: str, detail: str | None = None, status_code: int | None = None
    ) -> None:
        self.status_code = status_code
        super().__init__(message, detail)
