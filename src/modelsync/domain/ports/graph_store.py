"""Port onto the host graph store.

Only the primitives the reconciliation core needs are exposed. Queries return
results in store iteration order (insertion order for the bundled adapters);
"first match wins" lookups rely on that order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from modelsync.domain.model import (
        Bounds,
        Folder,
        GraphNode,
        Placement,
        PropertyValue,
        Relationship,
        View,
    )

type NodePredicate = Callable[[GraphNode], bool]
type RelationshipPredicate = Callable[[Relationship], bool]


@runtime_checkable
class GraphStore(Protocol):
    """Read and mutation primitives of the external model store."""

    # nodes

    def nodes(self, predicate: NodePredicate | None = None) -> tuple[GraphNode, ...]: ...

    def create_node(self, node_type: str, name: str) -> GraphNode: ...

    def get_property(self, node_id: str, key: str) -> PropertyValue | None: ...

    def set_property(self, node_id: str, key: str, value: PropertyValue) -> None: ...

    def get_documentation(self, node_id: str) -> str: ...

    def set_documentation(self, node_id: str, documentation: str) -> None: ...

    # relationships

    def relationships(
        self, predicate: RelationshipPredicate | None = None
    ) -> tuple[Relationship, ...]: ...

    def create_relationship(
        self, relationship_type: str, source_id: str, target_id: str
    ) -> Relationship: ...

    # folders

    def root_folders(self) -> tuple[Folder, ...]: ...

    def folder_children(self, folder_id: str) -> tuple[Folder, ...]: ...

    def create_folder(self, parent_id: str, name: str) -> Folder: ...

    def folder_members(self, folder_id: str) -> tuple[GraphNode, ...]: ...

    def move_to_folder(self, folder_id: str, node_id: str) -> None: ...

    # views

    def views(self, name: str | None = None) -> tuple[View, ...]: ...

    def create_view(self, name: str) -> View: ...

    def placements(self, view_id: str) -> tuple[Placement, ...]: ...

    def add_placement(
        self, view_id: str, node_id: str | None, bounds: Bounds | None
    ) -> Placement: ...

    def set_placement_bounds(self, placement_id: str, bounds: Bounds) -> None: ...
