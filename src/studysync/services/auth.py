"""Sign-up, login and logout workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.context import sync_run
from ..errors import AuthenticationError, RemoteUnavailableError
from ..remote import RemoteClient, RemoteResult, UserCredentials
from ..repositories import DisciplineRepository, ScheduleRepository, TaskRepository
from ..schemas import SyncReport
from .session import SessionHolder

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error. Try again later."

LOGIN_ERROR_MESSAGES: dict[int, str] = {
    401: "Invalid email or password.",
    404: "User not found.",
    500: SERVER_ERROR_MESSAGE,
}

SIGN_UP_ERROR_MESSAGES: dict[int, str] = {
    400: "Email already registered.",
    422: "Invalid data. Check it and try again.",
    500: SERVER_ERROR_MESSAGE,
}


@dataclass(slots=True)
class LoginResult:
    """The authenticated user and what the initial sync did."""

    user_id: int
    reports: list[SyncReport] = field(default_factory=list)


def _failure(
    result: RemoteResult[object],
    messages: dict[int, str],
    fallback: str,
) -> AuthenticationError:
    message = messages.get(result.status_code)
    if message is None:
        message = f"{fallback}: {result.message or 'unknown error'}"
    return AuthenticationError(
        message,
        status_code=result.status_code,
        details={"server_message": result.message},
    )


def _connection_failure(exc: RemoteUnavailableError) -> AuthenticationError:
    return AuthenticationError(
        f"Connection error: {exc.message}",
        code="connection_error",
        details=exc.details,
    )


class AuthService:
    """Account workflows tying the remote API to the local session."""

    def __init__(
        self,
        remote: RemoteClient,
        session: SessionHolder,
        disciplines: DisciplineRepository,
        schedules: ScheduleRepository,
        tasks: TaskRepository,
    ) -> None:
        self._remote = remote
        self._session = session
        self._disciplines = disciplines
        self._schedules = schedules
        self._tasks = tasks

    async def sign_up(self, *, email: str, password: str) -> None:
        """Register an account. The user still has to log in afterwards."""
        credentials = UserCredentials(email=email, password=password)
        try:
            result = await self._remote.users.create(credentials)
        except RemoteUnavailableError as exc:
            raise _connection_failure(exc) from exc
        if not result.success:
            logger.info("Sign-up rejected with status %s", result.status_code)
            raise _failure(result, SIGN_UP_ERROR_MESSAGES, "Sign-up failed")
        logger.info("Account created for %s", email)

    async def login(self, *, email: str, password: str) -> LoginResult:
        """Authenticate, store the session and run the initial sync.

        Disciplines are pulled first so tasks and schedules can resolve their
        discipline; anything created offline is pushed afterwards.
        """
        credentials = UserCredentials(email=email, password=password)
        try:
            result = await self._remote.users.login(credentials)
        except RemoteUnavailableError as exc:
            raise _connection_failure(exc) from exc
        if not result.success or result.data is None:
            logger.info("Login rejected with status %s", result.status_code)
            raise _failure(result, LOGIN_ERROR_MESSAGES, "Login failed")

        user_id = result.data.id
        await self._session.save(user_id)
        logger.info("User %s logged in", user_id)
        return LoginResult(user_id=user_id, reports=await self.initial_sync(user_id))

    async def initial_sync(self, user_id: int) -> list[SyncReport]:
        with sync_run("login"):
            return [
                await self._disciplines.sync_from_remote(user_id),
                await self._schedules.sync_from_remote(user_id),
                await self._tasks.sync_from_remote(user_id),
                await self._disciplines.sync_to_remote(user_id),
                await self._schedules.sync_to_remote(user_id),
                await self._tasks.sync_to_remote(user_id),
            ]

    async def logout(self) -> None:
        """Drop the session and every locally cached record."""
        for repository in (self._disciplines, self._schedules, self._tasks):
            await repository.drain()
        await self._session.clear()
        logger.info("User logged out")


__all__ = [
    "AuthService",
    "LOGIN_ERROR_MESSAGES",
    "LoginResult",
    "SIGN_UP_ERROR_MESSAGES",
]
