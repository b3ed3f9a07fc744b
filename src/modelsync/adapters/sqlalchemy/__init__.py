"""SQLAlchemy adapter package for modelsync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata
from .store import SqlAlchemyGraphStore
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    seed_category_roots,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyGraphStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "seed_category_roots",
    "shutdown",
    "startup",
]
