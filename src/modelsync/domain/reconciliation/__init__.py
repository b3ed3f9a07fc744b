"""Reconciliation core: from sheet rows and model nodes to merged records.

Stage order:
1) normalize raw payloads into ``SourceRow`` objects (``rows``)
2) match rows to model nodes by normalized name (``matching``)
3) resolve each matched node's grouping relationship (``grouping``)
4) merge sheet, model and computed values (``merge``)
5) derive reference codes (``codes``)
6) synthesize records for unmatched nodes (``graph_only``)
7) assign identifiers by composite key (``identity``)
"""

from __future__ import annotations

from .codes import CodeCache, apply_reference_codes, build_code_cache, combine_code
from .context import ReconciliationContext
from .engine import ReconciliationResult, reconcile
from .graph_only import synthesize_graph_only
from .grouping import resolve_grouping
from .identity import IdentityAssignment, assign_identities
from .matching import MatchResult, find_node_by_name, match_row
from .merge import apply_overrides, empty_record, graph_fields, merge_fields, merge_record
from .rows import (
    GridPayload,
    NormalizedRows,
    RecordsPayload,
    SingleRecordPayload,
    TabularPayload,
    classify_payload,
    normalize_rows,
)

__all__ = [
    "CodeCache",
    "GridPayload",
    "IdentityAssignment",
    "MatchResult",
    "NormalizedRows",
    "ReconciliationContext",
    "ReconciliationResult",
    "RecordsPayload",
    "SingleRecordPayload",
    "TabularPayload",
    "apply_overrides",
    "apply_reference_codes",
    "assign_identities",
    "build_code_cache",
    "classify_payload",
    "combine_code",
    "empty_record",
    "find_node_by_name",
    "graph_fields",
    "match_row",
    "merge_fields",
    "merge_record",
    "normalize_rows",
    "reconcile",
    "resolve_grouping",
    "synthesize_graph_only",
]
