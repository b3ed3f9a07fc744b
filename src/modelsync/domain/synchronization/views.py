"""View synchronization: one view per grouping label, one placement per node.

Labels come from the view label column (several labels may be listed with the
taxonomy delimiter); an empty label maps to the root view label. Views are
named ``"{label} {suffix}"`` and matched by exact name. After placements are
added each touched view is re-laid out as a square grid.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from modelsync.domain.model import Bounds
from modelsync.domain.reconciliation.text import sanitize_label, split_labels

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import GraphNode, MergedRecord, Placement, View
    from modelsync.domain.ports import GraphStore

type ExistingPlacementHook = Callable[[Placement, MergedRecord], None]

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ViewSyncResult:
    views_created: int = 0
    views_reused: int = 0
    placements_added: int = 0
    placements_existing: int = 0
    placements_moved: int = 0


def labels_for(record: MergedRecord, config: ReconciliationConfig) -> tuple[str, ...]:
    raw = record.get(config.view_label_column, "")
    labels = tuple(
        sanitized
        for label in split_labels(raw, config.taxonomy_delimiter)
        if (sanitized := sanitize_label(label))
    )
    return labels or (sanitize_label(config.root_view_label),)


def view_name(label: str, suffix: str) -> str:
    return f"{label} {suffix}".strip()


def ensure_view(store: GraphStore, name: str, result: ViewSyncResult | None = None) -> View:
    existing = store.views(name)
    if existing:
        if result is not None:
            result.views_reused += 1
        return existing[0]
    view = store.create_view(name)
    log.debug("Created view %r", name)
    if result is not None:
        result.views_created += 1
    return view


def grid_positions(count: int, cell_width: int, cell_height: int) -> list[tuple[int, int]]:
    """Top-left positions of ``count`` cells laid out in a square grid, row-major."""

    if count <= 0:
        return []
    columns = math.ceil(math.sqrt(count))
    return [
        ((index % columns) * cell_width, (index // columns) * cell_height)
        for index in range(count)
    ]


def arrange_grid(store: GraphStore, view: View, config: ReconciliationConfig) -> int:
    """Reposition the geometric placements of ``view``; return how many moved."""

    placements = [placement for placement in store.placements(view.id) if placement.is_geometric]
    positions = grid_positions(len(placements), config.cell_width, config.cell_height)
    moved = 0
    for placement, (x, y) in zip(placements, positions, strict=True):
        bounds = placement.bounds
        if bounds is None or (bounds.x, bounds.y) == (x, y):
            continue
        store.set_placement_bounds(placement.id, bounds.moved_to(x, y))
        moved += 1
    return moved


def sync_views(
    store: GraphStore,
    entries: Sequence[tuple[MergedRecord, GraphNode]],
    suffix: str,
    config: ReconciliationConfig,
    *,
    on_existing: ExistingPlacementHook | None = None,
) -> ViewSyncResult:
    """Ensure views and placements for ``entries`` and lay the views out."""

    result = ViewSyncResult()
    views: dict[str, View] = {}
    for record, _node in entries:
        for label in labels_for(record, config):
            if label not in views:
                views[label] = ensure_view(store, view_name(label, suffix), result)

    placeholder = Bounds(*config.placeholder_bounds)
    for record, node in entries:
        for label in labels_for(record, config):
            view = views[label]
            existing = next(
                (item for item in store.placements(view.id) if item.node_id == node.id),
                None,
            )
            if existing is not None:
                result.placements_existing += 1
                if on_existing is not None:
                    on_existing(existing, record)
                continue
            store.add_placement(view.id, node.id, placeholder)
            result.placements_added += 1

    for view in views.values():
        result.placements_moved += arrange_grid(store, view, config)

    log.info(
        "Views: created=%s, reused=%s; placements added=%s, existing=%s, moved=%s",
        result.views_created,
        result.views_reused,
        result.placements_added,
        result.placements_existing,
        result.placements_moved,
    )
    return result
