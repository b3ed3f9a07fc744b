"""Graph model entities as seen through the graph store port.

Instances are owned by the store. Adapters may hand out live objects (the
in-memory store) or snapshots (the SQL store); reconciliation code therefore
only mutates through the store and re-reads when it needs fresh state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

type PropertyValue = str | bool


@dataclass(slots=True, kw_only=True)
class GraphNode:
    """Typed, named element of the model."""

    id: str
    type: str
    name: str
    documentation: str = ""
    properties: dict[str, PropertyValue] = field(default_factory=dict["str", "PropertyValue"])
    folder_id: str | None = None

    def property_text(self, key: str) -> str:
        """Return the property as text; booleans render as ``true``/``false``."""

        value = self.properties.get(key)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value


@dataclass(slots=True, kw_only=True)
class Relationship:
    """Typed, directed edge between two nodes."""

    id: str
    type: str
    source: GraphNode
    target: GraphNode

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source.id, self.target.id)

    def other_end(self, node_id: str) -> GraphNode:
        """Return the endpoint that is not ``node_id`` (the target for self-loops)."""

        if self.source.id == node_id:
            return self.target
        if self.target.id == node_id:
            return self.source
        raise ValueError(f"Relationship {self.id} is not incident to node {node_id}")


@dataclass(slots=True, kw_only=True)
class Folder:
    id: str
    name: str
    parent_id: str | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(slots=True, kw_only=True)
class View:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int

    def moved_to(self, x: int, y: int) -> Bounds:
        return Bounds(x=x, y=y, width=self.width, height=self.height)


@dataclass(slots=True, kw_only=True)
class Placement:
    """Visual child of a view.

    Node placements carry ``bounds``; connections and other non-geometric
    children have ``bounds=None`` and are ignored by layout.
    """

    id: str
    view_id: str
    node_id: str | None = None
    bounds: Bounds | None = None

    @property
    def is_geometric(self) -> bool:
        return self.bounds is not None
