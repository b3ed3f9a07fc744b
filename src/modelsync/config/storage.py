"""Where the model database lives.

An explicit URI wins, then ``DATABASE_URI``, then a SQLite file in the data
directory (``MODELSYNC_DATA_DIR`` or the platform data home).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "MODELSYNC_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DEFAULT_DB_FILENAME: Final[str] = "model.db"


class UriSource(StrEnum):
    ARGUMENT = "argument"
    ENVIRONMENT = "environment"
    DATA_DIR = "data-dir"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self) -> Path:
        """Path of the SQLite file; creates the data directory on first use."""

        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    source: UriSource


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV)
    data_dir = Path(configured) if configured else _platform_data_home() / "modelsync"
    return StorageConfig(data_dir=data_dir)


def get_database_config(
    *,
    uri: str | None = None,
    storage: StorageConfig | None = None,
) -> DatabaseConfig:
    if uri:
        return DatabaseConfig(uri=uri, source=UriSource.ARGUMENT)
    env_uri = os.getenv(DATABASE_URI_ENV)
    if env_uri:
        return DatabaseConfig(uri=env_uri, source=UriSource.ENVIRONMENT)
    path = (storage or get_storage_config()).database_path()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{path}", source=UriSource.DATA_DIR)
