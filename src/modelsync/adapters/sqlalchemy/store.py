"""Graph store implementation backed by a SQLAlchemy session.

Reads return snapshots; every write is executed immediately inside the
session's transaction, and the unit of work decides when to commit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import insert, select, update

from modelsync.adapters.sqlalchemy.mappings import (
    folder_table,
    new_element_id,
    node_property_table,
    node_table,
    relationship_table,
    view_child_table,
    view_table,
)
from modelsync.domain.model import Bounds, Folder, GraphNode, Placement, Relationship, View

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from modelsync.domain.model import PropertyValue
    from modelsync.domain.ports import NodePredicate, RelationshipPredicate


class SqlAlchemyGraphStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    # nodes

    def nodes(self, predicate: NodePredicate | None = None) -> tuple[GraphNode, ...]:
        loaded = self._load_nodes()
        return tuple(node for node in loaded if predicate is None or predicate(node))

    def create_node(self, node_type: str, name: str) -> GraphNode:
        node_id = new_element_id()
        self.session.execute(
            insert(node_table).values(id=node_id, type=node_type, name=name, documentation="")
        )
        return GraphNode(id=node_id, type=node_type, name=name)

    def get_property(self, node_id: str, key: str) -> PropertyValue | None:
        self._require(node_table, node_id, "node")
        stmt = (
            select(node_property_table.c.value)
            .where(node_property_table.c.node_id == node_id)
            .where(node_property_table.c.key == key)
        )
        return cast("PropertyValue | None", self.session.execute(stmt).scalar_one_or_none())

    def set_property(self, node_id: str, key: str, value: PropertyValue) -> None:
        self._require(node_table, node_id, "node")
        condition = (node_property_table.c.node_id == node_id) & (
            node_property_table.c.key == key
        )
        exists = self.session.execute(
            select(node_property_table.c.key).where(condition)
        ).scalar_one_or_none()
        if exists is None:
            self.session.execute(
                insert(node_property_table).values(node_id=node_id, key=key, value=value)
            )
        else:
            self.session.execute(update(node_property_table).where(condition).values(value=value))

    def get_documentation(self, node_id: str) -> str:
        stmt = select(node_table.c.documentation).where(node_table.c.id == node_id)
        documentation = self.session.execute(stmt).scalar_one_or_none()
        if documentation is None:
            raise KeyError(f"Unknown node {node_id}")
        return str(documentation)

    def set_documentation(self, node_id: str, documentation: str) -> None:
        self._require(node_table, node_id, "node")
        self.session.execute(
            update(node_table).where(node_table.c.id == node_id).values(documentation=documentation)
        )

    # relationships

    def relationships(
        self, predicate: RelationshipPredicate | None = None
    ) -> tuple[Relationship, ...]:
        nodes_by_id = {node.id: node for node in self._load_nodes()}
        rows = self.session.execute(
            select(relationship_table).order_by(relationship_table.c.seq)
        ).mappings()
        relationships = (
            Relationship(
                id=row["id"],
                type=row["type"],
                source=nodes_by_id[row["source_id"]],
                target=nodes_by_id[row["target_id"]],
            )
            for row in rows
        )
        return tuple(rel for rel in relationships if predicate is None or predicate(rel))

    def create_relationship(
        self, relationship_type: str, source_id: str, target_id: str
    ) -> Relationship:
        source = self._node_snapshot(source_id)
        target = self._node_snapshot(target_id)
        relationship_id = new_element_id()
        self.session.execute(
            insert(relationship_table).values(
                id=relationship_id,
                type=relationship_type,
                source_id=source_id,
                target_id=target_id,
            )
        )
        return Relationship(id=relationship_id, type=relationship_type, source=source, target=target)

    # folders

    def create_root_folder(self, name: str) -> Folder:
        folder_id = new_element_id()
        self.session.execute(insert(folder_table).values(id=folder_id, name=name, parent_id=None))
        return Folder(id=folder_id, name=name)

    def root_folders(self) -> tuple[Folder, ...]:
        return self._load_folders(folder_table.c.parent_id.is_(None))

    def folder_children(self, folder_id: str) -> tuple[Folder, ...]:
        self._require(folder_table, folder_id, "folder")
        return self._load_folders(folder_table.c.parent_id == folder_id)

    def create_folder(self, parent_id: str, name: str) -> Folder:
        self._require(folder_table, parent_id, "folder")
        folder_id = new_element_id()
        self.session.execute(
            insert(folder_table).values(id=folder_id, name=name, parent_id=parent_id)
        )
        return Folder(id=folder_id, name=name, parent_id=parent_id)

    def folder_members(self, folder_id: str) -> tuple[GraphNode, ...]:
        self._require(folder_table, folder_id, "folder")
        return self._load_nodes(node_table.c.folder_id == folder_id)

    def move_to_folder(self, folder_id: str, node_id: str) -> None:
        self._require(folder_table, folder_id, "folder")
        self._require(node_table, node_id, "node")
        self.session.execute(
            update(node_table).where(node_table.c.id == node_id).values(folder_id=folder_id)
        )

    # views

    def views(self, name: str | None = None) -> tuple[View, ...]:
        stmt = select(view_table.c.id, view_table.c.name).order_by(view_table.c.seq)
        if name is not None:
            stmt = stmt.where(view_table.c.name == name)
        return tuple(View(id=row["id"], name=row["name"]) for row in self.session.execute(stmt).mappings())

    def create_view(self, name: str) -> View:
        view_id = new_element_id()
        self.session.execute(insert(view_table).values(id=view_id, name=name))
        return View(id=view_id, name=name)

    def placements(self, view_id: str) -> tuple[Placement, ...]:
        self._require(view_table, view_id, "view")
        stmt = (
            select(view_child_table)
            .where(view_child_table.c.view_id == view_id)
            .order_by(view_child_table.c.seq)
        )
        return tuple(_placement(row) for row in self.session.execute(stmt).mappings())

    def add_placement(
        self, view_id: str, node_id: str | None, bounds: Bounds | None
    ) -> Placement:
        self._require(view_table, view_id, "view")
        if node_id is not None:
            self._require(node_table, node_id, "node")
        placement_id = new_element_id()
        geometry: dict[str, int | None] = {"x": None, "y": None, "width": None, "height": None}
        if bounds is not None:
            geometry = {
                "x": bounds.x,
                "y": bounds.y,
                "width": bounds.width,
                "height": bounds.height,
            }
        self.session.execute(
            insert(view_child_table).values(
                id=placement_id, view_id=view_id, node_id=node_id, **geometry
            )
        )
        return Placement(id=placement_id, view_id=view_id, node_id=node_id, bounds=bounds)

    def set_placement_bounds(self, placement_id: str, bounds: Bounds) -> None:
        self._require(view_child_table, placement_id, "placement")
        self.session.execute(
            update(view_child_table)
            .where(view_child_table.c.id == placement_id)
            .values(x=bounds.x, y=bounds.y, width=bounds.width, height=bounds.height)
        )

    # helpers

    def _load_nodes(self, condition: ColumnElement[bool] | None = None) -> tuple[GraphNode, ...]:
        stmt = select(node_table).order_by(node_table.c.seq)
        if condition is not None:
            stmt = stmt.where(condition)
        rows = list(self.session.execute(stmt).mappings())
        if not rows:
            return ()

        properties: dict[str, dict[str, PropertyValue]] = {}
        property_stmt = select(node_property_table)
        if condition is not None:
            property_stmt = property_stmt.where(
                node_property_table.c.node_id.in_([row["id"] for row in rows])
            )
        for prop in self.session.execute(property_stmt).mappings():
            properties.setdefault(prop["node_id"], {})[prop["key"]] = prop["value"]

        return tuple(
            GraphNode(
                id=row["id"],
                type=row["type"],
                name=row["name"],
                documentation=row["documentation"] or "",
                properties=properties.get(row["id"], {}),
                folder_id=row["folder_id"],
            )
            for row in rows
        )

    def _node_snapshot(self, node_id: str) -> GraphNode:
        found = self._load_nodes(node_table.c.id == node_id)
        if not found:
            raise KeyError(f"Unknown node {node_id}")
        return found[0]

    def _load_folders(self, condition: ColumnElement[bool]) -> tuple[Folder, ...]:
        stmt = (
            select(folder_table.c.id, folder_table.c.name, folder_table.c.parent_id)
            .where(condition)
            .order_by(folder_table.c.seq)
        )
        return tuple(
            Folder(id=row["id"], name=row["name"], parent_id=row["parent_id"])
            for row in self.session.execute(stmt).mappings()
        )

    def _require(self, table: Any, element_id: str, kind: str) -> None:
        stmt = select(table.c.id).where(table.c.id == element_id)
        if self.session.execute(stmt).scalar_one_or_none() is None:
            raise KeyError(f"Unknown {kind} {element_id}")


def _placement(row: Mapping[str, Any]) -> Placement:
    bounds = None
    if None not in (row["x"], row["y"], row["width"], row["height"]):
        bounds = Bounds(x=row["x"], y=row["y"], width=row["width"], height=row["height"])
    return Placement(id=row["id"], view_id=row["view_id"], node_id=row["node_id"], bounds=bounds)


if TYPE_CHECKING:
    from modelsync.domain.ports import GraphStore

    _session_stub = cast("Session", object())
    _store_check: GraphStore = SqlAlchemyGraphStore(_session_stub)
