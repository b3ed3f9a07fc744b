"""Domain port definitions for adapters."""

from __future__ import annotations

from .graph_store import GraphStore, NodePredicate, RelationshipPredicate
from .tabular import RecordWriter, SheetReader, TabularSheet
from .unit_of_work import GraphUnitOfWork

__all__ = [
    "GraphStore",
    "GraphUnitOfWork",
    "NodePredicate",
    "RecordWriter",
    "RelationshipPredicate",
    "SheetReader",
    "TabularSheet",
]
