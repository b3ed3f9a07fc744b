"""Domain model for graph reconciliation."""

from __future__ import annotations

from .graph import Bounds, Folder, GraphNode, Placement, PropertyValue, Relationship, View
from .records import GroupingResult, MergedRecord, SourceRow, cell_text

__all__ = [
    "Bounds",
    "Folder",
    "GraphNode",
    "GroupingResult",
    "MergedRecord",
    "Placement",
    "PropertyValue",
    "Relationship",
    "SourceRow",
    "View",
    "cell_text",
]
