"""Per-invocation state threaded through the reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelsync.domain.ports import GraphStore

    from .codes import CodeCache


@dataclass(slots=True)
class ReconciliationContext:
    """Mutable state for exactly one reconciliation run.

    ``matched_ids`` collects node ids claimed by sheet rows so the graph-only
    stage can find the rest. ``code_cache`` holds the last reference-code
    table; it is reused only while the column signature stays the same. Do not
    share one context between runs.
    """

    matched_ids: set[str] = field(default_factory=set["str"])
    code_cache: CodeCache | None = None
    _view_membership: dict[str, list[str]] | None = field(default=None, repr=False)

    def mark_matched(self, node_id: str) -> None:
        self.matched_ids.add(node_id)

    def is_matched(self, node_id: str) -> bool:
        return node_id in self.matched_ids

    def view_names_for(self, store: GraphStore, node_id: str) -> list[str]:
        """Return names of the views that place ``node_id``, in view order."""

        if self._view_membership is None:
            self._view_membership = _index_view_membership(store)
        return self._view_membership.get(node_id, [])


def _index_view_membership(store: GraphStore) -> dict[str, list[str]]:
    membership: dict[str, list[str]] = {}
    for view in store.views():
        for placement in store.placements(view.id):
            if placement.node_id is None:
                continue
            names = membership.setdefault(placement.node_id, [])
            if view.name not in names:
                names.append(view.name)
    return membership
