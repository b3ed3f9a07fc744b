"""Entity matching: pair sheet rows with model nodes by normalized name."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .text import normalize_text

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import GraphNode, SourceRow
    from modelsync.domain.ports import GraphStore

    from .context import ReconciliationContext

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchResult:
    node: GraphNode | None = None
    name_match: bool = False
    desc_match: bool = False

    @property
    def matched(self) -> bool:
        return self.node is not None


NO_MATCH = MatchResult()


def find_node_by_name(
    store: GraphStore,
    name: str,
    *,
    node_types: tuple[str, ...] = (),
) -> GraphNode | None:
    """Return the first node whose normalized name equals ``name``'s.

    Ties are broken by store iteration order only.
    """

    wanted = normalize_text(name)
    if not wanted:
        return None
    allowed = {node_type.casefold() for node_type in node_types}

    def predicate(node: GraphNode) -> bool:
        if allowed and node.type.casefold() not in allowed:
            return False
        return normalize_text(node.name) == wanted

    candidates = store.nodes(predicate)
    if len(candidates) > 1:
        log.debug(
            "Name %r matches %s nodes; using first (%s)", name, len(candidates), candidates[0].id
        )
    return candidates[0] if candidates else None


def match_row(
    row: SourceRow,
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> MatchResult:
    """Look up the node for ``row`` and record it in ``context.matched_ids``."""

    node = find_node_by_name(store, row.text(config.name_column), node_types=config.match_types)
    if node is None:
        return NO_MATCH

    context.mark_matched(node.id)
    description = normalize_text(row.text(config.description_column))
    desc_match = description == normalize_text(node.documentation)
    return MatchResult(node=node, name_match=True, desc_match=desc_match)
