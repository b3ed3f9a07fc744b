"""Write merged records back into the model: folders, nodes and views."""

from __future__ import annotations

from .folders import (
    FolderSyncResult,
    ensure_child_folder,
    ensure_taxonomy_folders,
    find_root_folder,
    resolve_taxonomy_folder,
)
from .runner import RecordFailure, SyncSummary, sync_records
from .upsert import PropertyOutcome, PropertyStatus, UpsertOutcome, UpsertStatus, upsert_node
from .views import ViewSyncResult, arrange_grid, grid_positions, sync_views

__all__ = [
    "FolderSyncResult",
    "PropertyOutcome",
    "PropertyStatus",
    "RecordFailure",
    "SyncSummary",
    "UpsertOutcome",
    "UpsertStatus",
    "ViewSyncResult",
    "arrange_grid",
    "ensure_child_folder",
    "ensure_taxonomy_folders",
    "find_root_folder",
    "grid_positions",
    "resolve_taxonomy_folder",
    "sync_records",
    "sync_views",
    "upsert_node",
]
