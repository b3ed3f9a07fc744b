"""Dictionary-backed graph store.

Iteration order is insertion order everywhere. Returned objects are the live
stored instances, so callers must go through the store to mutate them.
``mutations`` counts every write, which makes idempotence easy to observe.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from modelsync.domain.model import Folder, GraphNode, Placement, Relationship, View

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelsync.domain.model import Bounds, PropertyValue
    from modelsync.domain.ports import NodePredicate, RelationshipPredicate


def new_element_id() -> str:
    return f"id-{uuid.uuid4().hex}"


class InMemoryGraphStore:
    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._relationships: dict[str, Relationship] = {}
        self._folders: dict[str, Folder] = {}
        self._views: dict[str, View] = {}
        self._placements: dict[str, Placement] = {}
        self.mutations = 0

    @classmethod
    def with_category_roots(cls, names: Iterable[str]) -> InMemoryGraphStore:
        store = cls()
        for name in names:
            store.create_root_folder(name)
        store.mutations = 0
        return store

    # nodes

    def nodes(self, predicate: NodePredicate | None = None) -> tuple[GraphNode, ...]:
        return tuple(node for node in self._nodes.values() if predicate is None or predicate(node))

    def create_node(self, node_type: str, name: str) -> GraphNode:
        node = GraphNode(id=new_element_id(), type=node_type, name=name)
        self._nodes[node.id] = node
        self.mutations += 1
        return node

    def get_property(self, node_id: str, key: str) -> PropertyValue | None:
        return self._node(node_id).properties.get(key)

    def set_property(self, node_id: str, key: str, value: PropertyValue) -> None:
        self._node(node_id).properties[key] = value
        self.mutations += 1

    def get_documentation(self, node_id: str) -> str:
        return self._node(node_id).documentation

    def set_documentation(self, node_id: str, documentation: str) -> None:
        self._node(node_id).documentation = documentation
        self.mutations += 1

    # relationships

    def relationships(
        self, predicate: RelationshipPredicate | None = None
    ) -> tuple[Relationship, ...]:
        return tuple(
            rel for rel in self._relationships.values() if predicate is None or predicate(rel)
        )

    def create_relationship(
        self, relationship_type: str, source_id: str, target_id: str
    ) -> Relationship:
        relationship = Relationship(
            id=new_element_id(),
            type=relationship_type,
            source=self._node(source_id),
            target=self._node(target_id),
        )
        self._relationships[relationship.id] = relationship
        self.mutations += 1
        return relationship

    # folders

    def create_root_folder(self, name: str) -> Folder:
        folder = Folder(id=new_element_id(), name=name)
        self._folders[folder.id] = folder
        self.mutations += 1
        return folder

    def root_folders(self) -> tuple[Folder, ...]:
        return tuple(folder for folder in self._folders.values() if folder.is_root)

    def all_folders(self) -> tuple[Folder, ...]:
        return tuple(self._folders.values())

    def folder_children(self, folder_id: str) -> tuple[Folder, ...]:
        self._folder(folder_id)
        return tuple(folder for folder in self._folders.values() if folder.parent_id == folder_id)

    def create_folder(self, parent_id: str, name: str) -> Folder:
        self._folder(parent_id)
        folder = Folder(id=new_element_id(), name=name, parent_id=parent_id)
        self._folders[folder.id] = folder
        self.mutations += 1
        return folder

    def folder_members(self, folder_id: str) -> tuple[GraphNode, ...]:
        self._folder(folder_id)
        return tuple(node for node in self._nodes.values() if node.folder_id == folder_id)

    def move_to_folder(self, folder_id: str, node_id: str) -> None:
        self._folder(folder_id)
        self._node(node_id).folder_id = folder_id
        self.mutations += 1

    # views

    def views(self, name: str | None = None) -> tuple[View, ...]:
        return tuple(view for view in self._views.values() if name is None or view.name == name)

    def create_view(self, name: str) -> View:
        view = View(id=new_element_id(), name=name)
        self._views[view.id] = view
        self.mutations += 1
        return view

    def placements(self, view_id: str) -> tuple[Placement, ...]:
        self._view(view_id)
        return tuple(item for item in self._placements.values() if item.view_id == view_id)

    def all_placements(self) -> tuple[Placement, ...]:
        return tuple(self._placements.values())

    def add_placement(
        self, view_id: str, node_id: str | None, bounds: Bounds | None
    ) -> Placement:
        self._view(view_id)
        if node_id is not None:
            self._node(node_id)
        placement = Placement(id=new_element_id(), view_id=view_id, node_id=node_id, bounds=bounds)
        self._placements[placement.id] = placement
        self.mutations += 1
        return placement

    def set_placement_bounds(self, placement_id: str, bounds: Bounds) -> None:
        placement = self._placements.get(placement_id)
        if placement is None:
            raise KeyError(f"Unknown placement {placement_id}")
        placement.bounds = bounds
        self.mutations += 1

    # lookups

    def _node(self, node_id: str) -> GraphNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise KeyError(f"Unknown node {node_id}")
        return node

    def _folder(self, folder_id: str) -> Folder:
        folder = self._folders.get(folder_id)
        if folder is None:
            raise KeyError(f"Unknown folder {folder_id}")
        return folder

    def _view(self, view_id: str) -> View:
        view = self._views.get(view_id)
        if view is None:
            raise KeyError(f"Unknown view {view_id}")
        return view


if TYPE_CHECKING:
    from modelsync.domain.ports import GraphStore

    _store_check: GraphStore = InMemoryGraphStore()
