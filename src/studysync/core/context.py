"""Correlation context for synchronization runs."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from uuid import uuid4

_sync_id_ctx_var: ContextVar[str] = ContextVar("sync_id", default="-")


def get_sync_id() -> str:
    """Return the sync run identifier for the current execution context."""

    return _sync_id_ctx_var.get()


def bind_sync_id(sync_id: str) -> Token[str]:
    """Bind a sync run identifier to the current execution context."""

    return _sync_id_ctx_var.set(sync_id)


def reset_sync_id(token: Token[str]) -> None:
    """Reset the sync run identifier using the provided context token."""

    _sync_id_ctx_var.reset(token)


@contextmanager
def sync_run(prefix: str) -> Iterator[str]:
    """Bind a fresh identifier for the duration of one sync run.

    Nested runs keep the outer identifier so a login sweep logs under a
    single id.
    """

    current = get_sync_id()
    if current != "-":
        yield current
        return
    sync_id = f"{prefix}:{uuid4().hex[:12]}"
    token = bind_sync_id(sync_id)
    try:
        yield sync_id
    finally:
        reset_sync_id(token)


__all__ = ["bind_sync_id", "get_sync_id", "reset_sync_id", "sync_run"]
