"""Records for model nodes that no sheet row matched."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from modelsync.config import MODEL_ONLY

from .codes import apply_reference_codes
from .merge import empty_record, graph_fields, merge_fields

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import GraphNode, MergedRecord
    from modelsync.domain.ports import GraphStore

    from .context import ReconciliationContext

log = logging.getLogger(__name__)


def unmatched_nodes(
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> tuple[GraphNode, ...]:
    allowed = {node_type.casefold() for node_type in config.match_types}

    def predicate(node: GraphNode) -> bool:
        if allowed and node.type.casefold() not in allowed:
            return False
        return not context.is_matched(node.id)

    return store.nodes(predicate)


def name_field_for_level(level: str, config: ReconciliationConfig) -> str:
    return config.level_name_fields.get(level.strip(), config.name_column)


def graph_only_record(
    node: GraphNode,
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> MergedRecord:
    record = empty_record(config)
    record[MODEL_ONLY] = "1"
    merge_fields(record, graph_fields(node, store, config, context))

    level = node.property_text(config.level_column).strip() or config.default_level
    record[config.level_column] = level

    for candidate in config.name_candidate_fields:
        record[candidate] = ""
    record[name_field_for_level(level, config)] = node.name
    record[config.description_column] = node.documentation
    return record


def synthesize_graph_only(
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> list[MergedRecord]:
    """Build one record per unmatched node and fill their reference codes."""

    records = [
        graph_only_record(node, store, config, context)
        for node in unmatched_nodes(store, config, context)
    ]
    if records:
        apply_reference_codes(records, config.model_only_codes, context)
    log.info("Synthesized %s graph-only record(s)", len(records))
    return records
