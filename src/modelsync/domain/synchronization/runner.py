"""Batch synchronization of merged records into the model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modelsync.config import MODEL_ONLY
from modelsync.domain.errors import LookupFailure

from .folders import FolderSyncResult, ensure_taxonomy_folders
from .upsert import UpsertStatus, record_identity, upsert_node
from .views import ExistingPlacementHook, ViewSyncResult, sync_views

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import Folder, GraphNode, MergedRecord
    from modelsync.domain.ports import GraphStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RecordFailure:
    position: int
    name: str
    error: str


@dataclass(slots=True)
class SyncSummary:
    added: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[RecordFailure] = field(default_factory=list["RecordFailure"])
    folders: FolderSyncResult = field(default_factory=FolderSyncResult)
    views: ViewSyncResult = field(default_factory=ViewSyncResult)

    @property
    def processed(self) -> int:
        return self.added + self.updated + self.skipped + self.failed


def _category_root(
    node_type: str,
    roots: dict[str, Folder],
    config: ReconciliationConfig,
) -> Folder:
    name = config.category_root_for(node_type)
    root = roots.get(name)
    if root is None:
        raise LookupFailure(f"Category root folder {name!r} for type {node_type!r} not found")
    return root


def sync_records(
    records: Sequence[MergedRecord],
    store: GraphStore,
    config: ReconciliationConfig,
    *,
    view_suffix: str | None = None,
    on_existing_placement: ExistingPlacementHook | None = None,
) -> SyncSummary:
    """Upsert every sheet-derived record, then ensure folders and views.

    Records synthesized from the model (``modelOnly == "1"``) are skipped.
    A failure while upserting one record is logged and counted; the batch
    carries on with the next record.
    """

    summary = SyncSummary()
    summary.folders = ensure_taxonomy_folders(store, config)
    roots = {folder.name: folder for folder in store.root_folders()}

    entries: list[tuple[MergedRecord, GraphNode]] = []
    for position, record in enumerate(records, start=1):
        if record.get(MODEL_ONLY) == "1":
            summary.skipped += 1
            continue
        node_type, name = record_identity(record, config)
        try:
            root = _category_root(node_type, roots, config)
            outcome = upsert_node(store, record, root, config)
        except Exception as exc:  # noqa: BLE001
            log.warning("Record %s (%r) failed: %s", position, name, exc)
            summary.failed += 1
            summary.failures.append(RecordFailure(position=position, name=name, error=str(exc)))
            continue
        if outcome.status is UpsertStatus.ADDED:
            summary.added += 1
        else:
            summary.updated += 1
        entries.append((record, outcome.node))

    summary.views = sync_views(
        store,
        entries,
        view_suffix if view_suffix is not None else config.view_suffix,
        config,
        on_existing=on_existing_placement,
    )

    log.info(
        "Sync finished: added=%s, updated=%s, skipped=%s, failed=%s",
        summary.added,
        summary.updated,
        summary.skipped,
        summary.failed,
    )
    return summary
