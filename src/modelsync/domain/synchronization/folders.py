"""Taxonomy folders: category root -> HeatMap -> one folder per taxonomy segment.

Existence is re-checked against the store on every call; nothing is cached,
so repeated calls never create a second folder with the same name under the
same parent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modelsync.domain.errors import LookupFailure
from modelsync.domain.reconciliation.text import normalize_segment, split_labels

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import Folder
    from modelsync.domain.ports import GraphStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class FolderSyncResult:
    created: int = 0
    reused: int = 0
    missing_roots: list[str] = field(default_factory=list["str"])


def find_root_folder(store: GraphStore, name: str) -> Folder:
    """Return the category root called exactly ``name``."""

    for folder in store.root_folders():
        if folder.name == name:
            return folder
    raise LookupFailure(f"Category root folder {name!r} not found")


def ensure_child_folder(
    store: GraphStore,
    parent: Folder,
    name: str,
    result: FolderSyncResult | None = None,
) -> Folder:
    """Return the child of ``parent`` named exactly ``name``, creating it if absent."""

    for child in store.folder_children(parent.id):
        if child.name == name:
            if result is not None:
                result.reused += 1
            return child
    folder = store.create_folder(parent.id, name)
    log.debug("Created folder %r under %r", name, parent.name)
    if result is not None:
        result.created += 1
    return folder


def ensure_taxonomy_folders(
    store: GraphStore,
    config: ReconciliationConfig,
) -> FolderSyncResult:
    """Ensure the HeatMap folder and every segment folder under each category root."""

    result = FolderSyncResult()
    segments = [normalize_segment(segment) for segment in config.taxonomy_segments]
    for root_name in config.category_roots:
        try:
            root = find_root_folder(store, root_name)
        except LookupFailure:
            log.warning("Category root folder %r not found; skipping", root_name)
            result.missing_roots.append(root_name)
            continue
        heatmap = ensure_child_folder(store, root, config.heatmap_folder, result)
        for segment in segments:
            if segment:
                ensure_child_folder(store, heatmap, segment, result)

    log.info("Taxonomy folders: created=%s, reused=%s", result.created, result.reused)
    return result


def resolve_taxonomy_folder(
    store: GraphStore,
    root: Folder,
    taxonomy: str,
    config: ReconciliationConfig,
) -> Folder:
    """Return the segment folder for the first configured segment named in ``taxonomy``.

    ``taxonomy`` may list several segments separated by the taxonomy
    delimiter. Raises ``LookupFailure`` when none of them is configured.
    """

    known = {
        normalize_segment(segment).casefold(): normalize_segment(segment)
        for segment in config.taxonomy_segments
    }
    for label in split_labels(taxonomy, config.taxonomy_delimiter):
        segment = known.get(normalize_segment(label).casefold())
        if segment:
            heatmap = ensure_child_folder(store, root, config.heatmap_folder)
            return ensure_child_folder(store, heatmap, segment)
    raise LookupFailure(f"No taxonomy folder for {taxonomy!r} under {root.name!r}")
