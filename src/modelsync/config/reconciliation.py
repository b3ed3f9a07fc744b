"""Static reconciliation configuration.

Every column name the engine reads or writes is declared here so that the
reconciliation stages never hard-code sheet layout. The defaults describe a
capability heat map: one row per capability with its domain, level, taxonomy
classification and owner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

NAME_MATCH: Final[str] = "nameMatch"
DESC_MATCH: Final[str] = "descMatch"
MODEL_ONLY: Final[str] = "modelOnly"
PROVENANCE_FLAGS: Final[tuple[str, ...]] = (NAME_MATCH, DESC_MATCH, MODEL_ONLY)

DEFAULT_RECOGNIZED_FIELDS: Final[tuple[str, ...]] = (
    "UUID",
    "Reference Code",
    "Level",
    "Domain",
    "Capability",
    "Name",
    "Description",
    "Taxonomy Classification",
    "Owner",
    "Type",
    "Element ID",
    "Grouping",
    "Grouping ID",
    "Grouping Relationship",
    "Grouping Relationship ID",
    "View Membership",
    NAME_MATCH,
    DESC_MATCH,
    MODEL_ONLY,
)

DEFAULT_TAXONOMY_SEGMENTS: Final[tuple[str, ...]] = (
    "Security",
    "Data & Analytics",
    "Customer Experience",
    "Operations",
    "Finance",
    "Human Resources",
    "Infrastructure",
)

DEFAULT_CATEGORY_ROOTS: Final[tuple[str, ...]] = (
    "Strategy",
    "Business",
    "Application",
    "Technology & Physical",
)


def _default_category_for_type() -> dict[str, str]:
    return {
        "capability": "Strategy",
        "value-stream": "Strategy",
        "resource": "Strategy",
        "course-of-action": "Strategy",
        "business-function": "Business",
        "business-process": "Business",
        "business-service": "Business",
        "application-component": "Application",
        "application-service": "Application",
        "node": "Technology & Physical",
        "system-software": "Technology & Physical",
    }


def _default_column_map() -> dict[str, str]:
    return {
        "Name": "name",
        "Type": "type",
        "Description": "documentation",
        "Taxonomy Classification": "taxonomy",
    }


def _default_level_name_fields() -> dict[str, str]:
    return {"0": "Domain", "1": "Capability", "2": "Name"}


def _default_unmatched_fallbacks() -> dict[str, str]:
    return {"Grouping": "Orphan"}


@dataclass(frozen=True, slots=True)
class CodeMapping:
    """Which columns feed one reference-code use case."""

    source_column: str
    reference_columns: tuple[str, ...]
    output_column: str

    @property
    def signature(self) -> tuple[str, ...]:
        return (self.source_column, *self.reference_columns, "->", self.output_column)


@dataclass(frozen=True, slots=True)
class GroupingColumns:
    """Output columns receiving the grouping resolver result."""

    target_name: str = "Grouping"
    target_id: str = "Grouping ID"
    rel_type: str = "Grouping Relationship"
    rel_id: str = "Grouping Relationship ID"


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    # sheet layout
    recognized_fields: tuple[str, ...] = DEFAULT_RECOGNIZED_FIELDS
    required_columns: tuple[str, ...] = ("Name",)
    name_column: str = "Name"
    description_column: str = "Description"
    type_column: str = "Type"
    level_column: str = "Level"
    element_id_column: str = "Element ID"
    view_membership_column: str = "View Membership"
    tabular_columns: tuple[str, ...] = (
        "UUID",
        "Level",
        "Domain",
        "Capability",
        "Name",
        "Description",
        "Taxonomy Classification",
        "Owner",
        "Type",
    )
    property_columns: tuple[str, ...] = (
        "UUID",
        "Level",
        "Domain",
        "Capability",
        "Taxonomy Classification",
        "Owner",
    )
    override_columns: tuple[str, ...] = ("Taxonomy Classification", "Level")
    column_map: dict[str, str] = field(default_factory=_default_column_map)
    unmatched_fallbacks: dict[str, str] = field(default_factory=_default_unmatched_fallbacks)
    skip_rows: int = 2

    # matching and grouping
    match_types: tuple[str, ...] = ()
    relationship_precedence: tuple[str, ...] = (
        "composition-relationship",
        "aggregation-relationship",
        "realization-relationship",
        "association-relationship",
    )
    grouping_target_types: frozenset[str] = frozenset({"grouping"})
    grouping_columns: GroupingColumns = field(default_factory=GroupingColumns)

    # graph-only records
    level_name_fields: dict[str, str] = field(default_factory=_default_level_name_fields)
    default_level: str = "0"

    # taxonomy folders
    taxonomy_segments: tuple[str, ...] = DEFAULT_TAXONOMY_SEGMENTS
    taxonomy_delimiter: str = ";"
    category_roots: tuple[str, ...] = DEFAULT_CATEGORY_ROOTS
    category_for_type: dict[str, str] = field(default_factory=_default_category_for_type)
    default_category: str = "Strategy"
    default_entity_type: str = "capability"
    heatmap_folder: str = "HeatMap"

    # views
    view_label_column: str = "Domain"
    root_view_label: str = "Enterprise"
    view_suffix: str = "HeatMap"
    cell_width: int = 160
    cell_height: int = 80
    placeholder_bounds: tuple[int, int, int, int] = (10, 10, 120, 55)

    # identities and reference codes
    identity_columns: tuple[str, ...] = ("Level", "Domain", "Capability", "Name")
    identity_column: str = "UUID"
    stable_identifiers: bool = False
    sheet_codes: CodeMapping = field(
        default_factory=lambda: CodeMapping(
            source_column="Domain",
            reference_columns=("Capability", "Name"),
            output_column="Reference Code",
        )
    )
    model_only_codes: CodeMapping = field(
        default_factory=lambda: CodeMapping(
            source_column="Grouping",
            reference_columns=("Name", "Capability", "Domain"),
            output_column="Reference Code",
        )
    )

    @property
    def name_candidate_fields(self) -> tuple[str, ...]:
        """Columns that may receive a model-only node's name, in table order."""

        candidates = [*self.level_name_fields.values(), self.name_column]
        return tuple(dict.fromkeys(candidates))

    def column_for(self, internal_field: str) -> str | None:
        """Return the sheet column mapped to ``internal_field``, if any."""

        for column, internal in self.column_map.items():
            if internal == internal_field:
                return column
        return None

    def category_root_for(self, node_type: str) -> str:
        return self.category_for_type.get(node_type.casefold(), self.default_category)


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig()
