"""Metadata registry for the local store."""

from __future__ import annotations

from sqlmodel import SQLModel

from .. import models  # noqa: F401  # register tables on SQLModel.metadata

# Bump together with any change to the entity tables. Opening an older store
# drops and recreates them (see ``session.upgrade_schema``).
SCHEMA_VERSION = 2

__all__ = ["SCHEMA_VERSION", "SQLModel"]
