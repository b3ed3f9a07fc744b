"""Property merging: combine sheet, model and computed values into one record.

Merge order for a matched row:

1. tabular tier: configured sheet columns copied verbatim
2. model tier: node properties and supplement fields (type, element id,
   grouping, view membership); existing non-empty values are kept unless
   ``overwrite`` is requested
3. dynamic tier: caller-computed fields, always overwriting
4. override pass: ``override_columns`` are copied from the sheet row again so
   that the spreadsheet always wins for them
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from modelsync.config import DESC_MATCH, MODEL_ONLY, NAME_MATCH

from .grouping import resolve_grouping

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import GraphNode, MergedRecord, SourceRow
    from modelsync.domain.ports import GraphStore

    from .context import ReconciliationContext
    from .matching import MatchResult


def _flag(value: bool) -> str:
    return "1" if value else "0"


def empty_record(config: ReconciliationConfig) -> MergedRecord:
    """Record with every recognized field set to ``""`` and all flags ``"0"``."""

    record: MergedRecord = dict.fromkeys(config.recognized_fields, "")
    record.update({NAME_MATCH: "0", DESC_MATCH: "0", MODEL_ONLY: "0"})
    return record


def merge_fields(
    record: MergedRecord,
    values: Mapping[str, str],
    *,
    overwrite: bool = False,
) -> MergedRecord:
    """Merge ``values`` into ``record`` in place.

    Without ``overwrite`` a key that already holds a non-empty value is left
    alone; empty incoming values never clear anything.
    """

    for key, value in values.items():
        if not value:
            continue
        if record.get(key) and not overwrite:
            continue
        record[key] = value
    return record


def tabular_fields(row: SourceRow, config: ReconciliationConfig) -> dict[str, str]:
    return {column: row.text(column) for column in config.tabular_columns if row.has(column)}


def graph_fields(
    node: GraphNode,
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> dict[str, str]:
    """Model-derived values for ``node``: property lookups plus supplements."""

    values = {key: node.property_text(key) for key in config.property_columns}

    grouping = resolve_grouping(
        store,
        node,
        config.relationship_precedence,
        config.grouping_target_types,
    )
    columns = config.grouping_columns
    values.update(
        {
            columns.target_name: grouping.target_name,
            columns.target_id: grouping.target_id,
            columns.rel_type: grouping.rel_type,
            columns.rel_id: grouping.rel_id,
            config.type_column: node.type,
            config.element_id_column: node.id,
            config.view_membership_column: f"{config.taxonomy_delimiter} ".join(
                context.view_names_for(store, node.id)
            ),
        }
    )
    return values


def apply_overrides(
    record: MergedRecord,
    row: SourceRow,
    config: ReconciliationConfig,
) -> MergedRecord:
    """Force the sheet's value for every override column the row carries."""

    for column in config.override_columns:
        if row.has(column):
            record[column] = row.text(column)
    return record


def merge_record(
    row: SourceRow,
    match: MatchResult,
    store: GraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
    *,
    dynamic: Mapping[str, str] | None = None,
    overwrite: bool = False,
) -> MergedRecord:
    """Build the merged record for one sheet row."""

    record = empty_record(config)
    merge_fields(record, tabular_fields(row, config), overwrite=True)

    if match.node is not None:
        record[NAME_MATCH] = _flag(match.name_match)
        record[DESC_MATCH] = _flag(match.desc_match)
        merge_fields(record, graph_fields(match.node, store, config, context), overwrite=overwrite)
    else:
        merge_fields(record, config.unmatched_fallbacks)

    if dynamic:
        merge_fields(record, dynamic, overwrite=True)

    return apply_overrides(record, row, config)
