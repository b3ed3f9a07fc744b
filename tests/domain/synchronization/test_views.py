from __future__ import annotations

from typing import TYPE_CHECKING

from modelsync.domain.model import Bounds
from modelsync.domain.reconciliation import empty_record
from modelsync.domain.synchronization import arrange_grid, grid_positions, sync_views
from modelsync.domain.synchronization.views import labels_for
from tests.helpers.model import add_node

if TYPE_CHECKING:
    from modelsync.adapters.memory import InMemoryGraphStore
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import GraphNode, MergedRecord, Placement


def _entry(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
    name: str,
    domain: str,
) -> tuple[MergedRecord, GraphNode]:
    record = empty_record(config)
    record.update({"Name": name, "Domain": domain})
    return record, add_node(store, "capability", name)


def test_grid_is_square_and_row_major() -> None:
    positions = grid_positions(10, 160, 80)

    assert len(positions) == 10
    assert positions[:4] == [(0, 0), (160, 0), (320, 0), (480, 0)]
    assert positions[7] == (3 * 160, 1 * 80)
    assert positions[9] == (160, 160)


def test_grid_of_nothing_is_empty() -> None:
    assert grid_positions(0, 160, 80) == []


def test_labels_fall_back_to_root_view_and_split_on_delimiter(
    config: ReconciliationConfig,
) -> None:
    record = empty_record(config)
    assert labels_for(record, config) == ("Enterprise",)

    record["Domain"] = "Finance; Security/Risk ; Finance"
    assert labels_for(record, config) == ("Finance", "Security Risk")


def test_views_and_placements_are_created_once(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    entries = [
        _entry(store, config, "Ledger", "Finance"),
        _entry(store, config, "Treasury", "Finance"),
        _entry(store, config, "Firewall", ""),
    ]

    result = sync_views(store, entries, "HeatMap", config)

    assert [view.name for view in store.views()] == ["Finance HeatMap", "Enterprise HeatMap"]
    assert (result.views_created, result.placements_added) == (2, 3)
    finance = store.views("Finance HeatMap")[0]
    bounds = [item.bounds for item in store.placements(finance.id)]
    assert bounds == [Bounds(0, 0, 120, 55), Bounds(160, 0, 120, 55)]


def test_rerun_reports_existing_placements_without_mutating(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    entries = [_entry(store, config, "Ledger", "Finance"), _entry(store, config, "IAM", "Security")]
    sync_views(store, entries, "HeatMap", config)
    store.mutations = 0
    seen: list[tuple[str | None, str]] = []

    def on_existing(placement: Placement, record: MergedRecord) -> None:
        seen.append((placement.node_id, record["Name"]))

    result = sync_views(store, entries, "HeatMap", config, on_existing=on_existing)

    assert (result.views_created, result.views_reused) == (0, 2)
    assert (result.placements_added, result.placements_existing) == (0, 2)
    assert result.placements_moved == 0
    assert seen == [(entries[0][1].id, "Ledger"), (entries[1][1].id, "IAM")]
    assert store.mutations == 0


def test_arrange_grid_ignores_non_geometric_children(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    view = store.create_view("Finance HeatMap")
    first = add_node(store, "capability", "Ledger")
    second = add_node(store, "capability", "Treasury")
    store.add_placement(view.id, first.id, Bounds(500, 500, 120, 55))
    connection = store.add_placement(view.id, None, None)
    store.add_placement(view.id, second.id, Bounds(160, 0, 120, 55))

    moved = arrange_grid(store, view, config)

    assert moved == 1
    placements = store.placements(view.id)
    assert placements[0].bounds == Bounds(0, 0, 120, 55)
    assert placements[1].id == connection.id
    assert placements[1].bounds is None
    assert placements[2].bounds == Bounds(160, 0, 120, 55)
