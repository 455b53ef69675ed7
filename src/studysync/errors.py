"""Application-level exception types."""

from __future__ import annotations

from typing import Any


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class PreconditionError(ApplicationError):
    """Raised before any I/O when an operation cannot start."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "precondition_failed",
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class NotAuthenticatedError(ApplicationError):
    """Raised when a scoped operation runs without a stored session."""

    def __init__(
        self,
        message: str = "No user is logged in.",
        *,
        code: str = "not_authenticated",
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class RemoteUnavailableError(ApplicationError):
    """Raised when the remote API cannot be reached at all."""

    def __init__(
        self,
        message: str = "Remote API is unreachable.",
        *,
        code: str = "remote_unavailable",
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class AuthenticationError(ApplicationError):
    """Login or sign-up failure carrying a message fit for display."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "authentication_failed",
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.status_code = status_code


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "PreconditionError",
    "RemoteUnavailableError",
]
