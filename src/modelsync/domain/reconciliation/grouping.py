"""Grouping resolution: pick the one relationship that represents a node's parent.

Relationship types are a precedence list, not a filter. The first type that
has any relationship incident to the node decides the result:

1. an incident relationship whose other end has a grouping-target type wins
2. otherwise the first incident relationship's other end is used anyway
3. later relationship types are never consulted once a type had a hit
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from modelsync.domain.model import GroupingResult

if TYPE_CHECKING:
    from modelsync.domain.model import GraphNode, Relationship
    from modelsync.domain.ports import GraphStore

log = logging.getLogger(__name__)


def resolve_grouping(
    store: GraphStore,
    node: GraphNode,
    relationship_types: Iterable[str],
    target_types: Iterable[str],
) -> GroupingResult:
    """Return the grouping for ``node`` or ``GroupingResult.EMPTY``."""

    wanted_targets = {target_type.casefold() for target_type in target_types}
    incident = store.relationships(lambda rel: rel.touches(node.id))

    for relationship_type in relationship_types:
        of_type = [rel for rel in incident if rel.type == relationship_type]
        if not of_type:
            continue
        for relationship in of_type:
            other = relationship.other_end(node.id)
            if other.type.casefold() in wanted_targets:
                return _result(relationship, other)
        fallback = of_type[0]
        log.debug(
            "No grouping target among %s %s relationships of %s; falling back to %s",
            len(of_type),
            relationship_type,
            node.id,
            fallback.id,
        )
        return _result(fallback, fallback.other_end(node.id))

    return GroupingResult.EMPTY


def _result(relationship: Relationship, target: GraphNode) -> GroupingResult:
    return GroupingResult(
        target_name=target.name,
        target_id=target.id,
        rel_type=relationship.type,
        rel_id=relationship.id,
    )
