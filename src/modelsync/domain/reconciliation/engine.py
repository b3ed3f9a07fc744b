"""Orchestrator for the reconciliation stages.

``reconcile`` turns a raw tabular payload plus the current model into merged
records: one per sheet row (in source order) followed by one per model node no
row matched (in store order). It reads the model but never mutates it; use
``modelsync.domain.synchronization.sync_records`` to write records back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .codes import apply_reference_codes
from .context import ReconciliationContext
from .graph_only import synthesize_graph_only
from .identity import IdentityAssignment, assign_identities
from .matching import match_row
from .merge import merge_record
from .rows import normalize_rows

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import MergedRecord
    from modelsync.domain.ports import GraphStore

    from .rows import TabularPayload

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationResult:
    """Merged records and how they came about."""

    records: list[MergedRecord] = field(default_factory=list["MergedRecord"])
    source_rows: int = 0
    matched_rows: int = 0
    graph_only: int = 0
    identities: IdentityAssignment = field(default_factory=IdentityAssignment)

    @property
    def unmatched_rows(self) -> int:
        return self.source_rows - self.matched_rows


def reconcile(
    payload: TabularPayload | object,
    store: GraphStore,
    config: ReconciliationConfig,
    *,
    context: ReconciliationContext | None = None,
    header: Sequence[str] | None = None,
    include_graph_only: bool = True,
) -> ReconciliationResult:
    """Run normalization, matching, merging, codes, graph-only and identities."""

    active_context = context or ReconciliationContext()
    normalized = normalize_rows(payload, skip_rows=config.skip_rows, header=header)
    if normalized.rows:
        normalized.require_columns(config.required_columns)

    result = ReconciliationResult(source_rows=len(normalized))
    sheet_records: list[MergedRecord] = []
    for row in normalized.rows:
        match = match_row(row, store, config, active_context)
        if match.matched:
            result.matched_rows += 1
        sheet_records.append(merge_record(row, match, store, config, active_context))

    if sheet_records:
        apply_reference_codes(sheet_records, config.sheet_codes, active_context)

    graph_only_records: list[MergedRecord] = []
    if include_graph_only:
        graph_only_records = synthesize_graph_only(store, config, active_context)

    result.records = [*sheet_records, *graph_only_records]
    result.graph_only = len(graph_only_records)
    result.identities = assign_identities(
        result.records,
        key_columns=config.identity_columns,
        output_column=config.identity_column,
        stable=config.stable_identifiers,
    )

    log.info(
        "Reconciled %s row(s): matched=%s, unmatched=%s, graph_only=%s",
        result.source_rows,
        result.matched_rows,
        result.unmatched_rows,
        result.graph_only,
    )
    return result
