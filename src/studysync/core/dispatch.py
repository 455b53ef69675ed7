"""Scheduling of remote pushes that follow a local write."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WaitPolicy(str, Enum):
    """Whether a mutation waits for its remote round-trip."""

    AWAIT = "await"
    DETACH = "detach"


class PushDispatcher:
    """Run remote pushes inline or as tracked background tasks."""

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of detached pushes that have not finished yet."""

        return len(self._pending)

    async def submit(
        self,
        push: Coroutine[Any, Any, T],
        policy: WaitPolicy = WaitPolicy.AWAIT,
        *,
        name: str | None = None,
    ) -> T | None:
        """Run ``push`` according to ``policy``.

        Awaited pushes return their result. Detached pushes return ``None``
        immediately; their outcome is only visible through the store.
        """

        if policy is WaitPolicy.AWAIT:
            return await push
        task = asyncio.create_task(push, name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return None

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Detached push %s failed",
                task.get_name(),
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def drain(self) -> None:
        """Wait until every detached push has completed."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


__all__ = ["PushDispatcher", "WaitPolicy"]
