"""Application services built on top of the repositories."""

from __future__ import annotations

from .auth import AuthService, LoginResult
from .session import SessionHolder

__all__ = ["AuthService", "LoginResult", "SessionHolder"]
