from __future__ import annotations

from typing import TYPE_CHECKING

from modelsync.domain.model import GroupingResult
from modelsync.domain.reconciliation import resolve_grouping
from tests.helpers.model import add_node

if TYPE_CHECKING:
    from modelsync.adapters.memory import InMemoryGraphStore

PRECEDENCE = (
    "composition-relationship",
    "aggregation-relationship",
    "association-relationship",
)
TARGETS = ("Grouping",)


def test_no_relationships_gives_empty_result(store: InMemoryGraphStore) -> None:
    node = add_node(store, "capability", "Lonely")

    result = resolve_grouping(store, node, PRECEDENCE, TARGETS)

    assert result == GroupingResult.EMPTY
    assert result.is_empty


def test_grouping_target_found_in_either_direction(store: InMemoryGraphStore) -> None:
    node = add_node(store, "capability", "Payments")
    group = add_node(store, "grouping", "Finance")
    rel = store.create_relationship("aggregation-relationship", group.id, node.id)

    result = resolve_grouping(store, node, PRECEDENCE, TARGETS)

    assert result == GroupingResult(
        target_name="Finance",
        target_id=group.id,
        rel_type="aggregation-relationship",
        rel_id=rel.id,
    )


def test_target_type_preferred_within_one_relationship_type(store: InMemoryGraphStore) -> None:
    node = add_node(store, "capability", "Payments")
    other = add_node(store, "capability", "Treasury")
    group = add_node(store, "grouping", "Finance")
    store.create_relationship("composition-relationship", node.id, other.id)
    store.create_relationship("composition-relationship", group.id, node.id)

    result = resolve_grouping(store, node, PRECEDENCE, TARGETS)

    assert result.target_id == group.id


def test_first_type_with_any_relationship_stops_the_search(store: InMemoryGraphStore) -> None:
    # A later type would yield a grouping target, but the composition hit wins.
    node = add_node(store, "capability", "Payments")
    peer = add_node(store, "capability", "Treasury")
    group = add_node(store, "grouping", "Finance")
    composition = store.create_relationship("composition-relationship", peer.id, node.id)
    store.create_relationship("aggregation-relationship", group.id, node.id)

    result = resolve_grouping(store, node, PRECEDENCE, TARGETS)

    assert result.target_id == peer.id
    assert result.rel_id == composition.id
    assert result.rel_type == "composition-relationship"


def test_unlisted_relationship_types_are_ignored(store: InMemoryGraphStore) -> None:
    node = add_node(store, "capability", "Payments")
    group = add_node(store, "grouping", "Finance")
    store.create_relationship("flow-relationship", group.id, node.id)

    assert resolve_grouping(store, node, PRECEDENCE, TARGETS).is_empty
