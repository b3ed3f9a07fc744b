"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError, MissingConfigurationError
from .reconciliation import (
    DESC_MATCH,
    MODEL_ONLY,
    NAME_MATCH,
    PROVENANCE_FLAGS,
    CodeMapping,
    GroupingColumns,
    ReconciliationConfig,
    get_reconciliation_config,
)
from .settings_file import load_reconciliation_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    UriSource,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "DESC_MATCH",
    "MODEL_ONLY",
    "NAME_MATCH",
    "PROVENANCE_FLAGS",
    "CodeMapping",
    "ConfigurationError",
    "DatabaseConfig",
    "GroupingColumns",
    "MissingConfigurationError",
    "ReconciliationConfig",
    "StorageConfig",
    "UriSource",
    "get_database_config",
    "get_reconciliation_config",
    "get_storage_config",
    "load_reconciliation_config",
]
