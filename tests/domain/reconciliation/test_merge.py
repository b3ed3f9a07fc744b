from __future__ import annotations

from typing import TYPE_CHECKING

from modelsync.config import DESC_MATCH, MODEL_ONLY, NAME_MATCH
from modelsync.domain.model import SourceRow
from modelsync.domain.reconciliation import (
    empty_record,
    match_row,
    merge_fields,
    merge_record,
)
from modelsync.domain.reconciliation.matching import NO_MATCH
from tests.helpers.model import add_node

if TYPE_CHECKING:
    from modelsync.adapters.memory import InMemoryGraphStore
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.reconciliation import ReconciliationContext


def test_empty_record_has_every_recognized_field(config: ReconciliationConfig) -> None:
    record = empty_record(config)

    assert set(record) == set(config.recognized_fields)
    assert record[NAME_MATCH] == record[DESC_MATCH] == record[MODEL_ONLY] == "0"
    assert record["Name"] == ""


def test_merge_fields_keeps_existing_values_unless_overwriting() -> None:
    record = {"Owner": "Sheet", "Level": ""}

    merge_fields(record, {"Owner": "Model", "Level": "2"})
    assert record == {"Owner": "Sheet", "Level": "2"}

    merge_fields(record, {"Owner": "Forced", "Level": ""}, overwrite=True)
    assert record == {"Owner": "Forced", "Level": "2"}


def test_sheet_wins_over_model_for_shared_fields(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> None:
    add_node(
        store,
        "capability",
        "Payments",
        properties={"Owner": "Model Owner", "Domain": "Finance"},
    )
    row = SourceRow(fields={"Name": "Payments", "Owner": "Sheet Owner", "Domain": ""}, sequence=3)
    match = match_row(row, store, config, context)

    record = merge_record(row, match, store, config, context)

    assert record["Owner"] == "Sheet Owner"
    assert record["Domain"] == "Finance"
    assert record[NAME_MATCH] == "1"


def test_override_columns_always_come_from_the_sheet(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> None:
    add_node(
        store,
        "capability",
        "Payments",
        properties={"Level": "2", "Taxonomy Classification": "Finance"},
    )
    row = SourceRow(
        fields={"Name": "Payments", "Level": "", "Taxonomy Classification": "Security"},
        sequence=3,
    )
    match = match_row(row, store, config, context)

    record = merge_record(
        row,
        match,
        store,
        config,
        context,
        dynamic={"Level": "9", "Owner": "Computed"},
    )

    assert record["Level"] == ""
    assert record["Taxonomy Classification"] == "Security"
    assert record["Owner"] == "Computed"


def test_sheet_taxonomy_overrides_model_while_empty_owner_takes_model_value(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> None:
    add_node(
        store,
        "capability",
        "Payments",
        properties={"Taxonomy Classification": "Legacy", "Owner": "Model Owner"},
    )
    row = SourceRow(
        fields={
            "Name": "Payments",
            "Level": "2",
            "Taxonomy Classification": "Security",
            "Owner": "",
        },
        sequence=3,
    )
    match = match_row(row, store, config, context)

    record = merge_record(row, match, store, config, context)

    assert record["Taxonomy Classification"] == "Security"
    assert record["Level"] == "2"
    assert record["Owner"] == "Model Owner"


def test_model_supplements_type_element_id_grouping_and_views(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> None:
    node = add_node(store, "capability", "Payments")
    group = add_node(store, "grouping", "Finance")
    rel = store.create_relationship("composition-relationship", group.id, node.id)
    for name in ("Finance HeatMap", "Enterprise HeatMap"):
        view = store.create_view(name)
        store.add_placement(view.id, node.id, None)
    row = SourceRow(fields={"Name": "Payments"}, sequence=3)

    record = merge_record(row, match_row(row, store, config, context), store, config, context)

    assert record["Type"] == "capability"
    assert record["Element ID"] == node.id
    assert record["Grouping"] == "Finance"
    assert record["Grouping ID"] == group.id
    assert record["Grouping Relationship"] == "composition-relationship"
    assert record["Grouping Relationship ID"] == rel.id
    assert record["View Membership"] == "Finance HeatMap; Enterprise HeatMap"


def test_unmatched_row_gets_fallbacks_and_no_model_fields(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    context: ReconciliationContext,
) -> None:
    row = SourceRow(fields={"Name": "Ghost", "Owner": "Ops"}, sequence=3)

    record = merge_record(row, NO_MATCH, store, config, context)

    assert record["Grouping"] == "Orphan"
    assert record["Owner"] == "Ops"
    assert record["Element ID"] == ""
    assert record[NAME_MATCH] == "0"
    assert record[MODEL_ONLY] == "0"
