from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from modelsync.adapters.memory import InMemoryGraphStore
from modelsync.domain.errors import LookupFailure
from modelsync.domain.synchronization import (
    ensure_child_folder,
    ensure_taxonomy_folders,
    find_root_folder,
    resolve_taxonomy_folder,
)

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig


def _children(store: InMemoryGraphStore, folder_id: str) -> list[str]:
    return [folder.name for folder in store.folder_children(folder_id)]


def test_taxonomy_tree_is_created_under_every_root(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    result = ensure_taxonomy_folders(store, config)

    assert result.created == len(config.category_roots) * (1 + len(config.taxonomy_segments))
    assert result.missing_roots == []
    strategy = find_root_folder(store, "Strategy")
    (heatmap,) = store.folder_children(strategy.id)
    assert heatmap.name == "HeatMap"
    assert _children(store, heatmap.id) == [
        "Security",
        "DataAnalytics",
        "CustomerExperience",
        "Operations",
        "Finance",
        "HumanResources",
        "Infrastructure",
    ]


def test_second_run_reuses_every_folder(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    first = ensure_taxonomy_folders(store, config)
    store.mutations = 0

    second = ensure_taxonomy_folders(store, config)

    assert second.created == 0
    assert second.reused == first.created
    assert store.mutations == 0
    assert len(store.all_folders()) == len(config.category_roots) + first.created


def test_missing_roots_are_reported_and_skipped(config: ReconciliationConfig) -> None:
    store = InMemoryGraphStore.with_category_roots(["Business"])

    result = ensure_taxonomy_folders(store, config)

    assert result.missing_roots == ["Strategy", "Application", "Technology & Physical"]
    assert result.created == 1 + len(config.taxonomy_segments)


def test_root_lookup_is_exact(store: InMemoryGraphStore) -> None:
    with pytest.raises(LookupFailure):
        find_root_folder(store, "strategy")


def test_child_folder_names_are_case_sensitive(store: InMemoryGraphStore) -> None:
    root = find_root_folder(store, "Business")
    upper = ensure_child_folder(store, root, "HeatMap")

    lower = ensure_child_folder(store, root, "heatmap")

    assert upper.id != lower.id
    assert ensure_child_folder(store, root, "HeatMap").id == upper.id


def test_resolve_taxonomy_folder_uses_first_known_segment(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    root = find_root_folder(store, "Strategy")

    folder = resolve_taxonomy_folder(store, root, "Unknown; data & analytics; Finance", config)

    assert folder.name == "DataAnalytics"
    heatmap = store.folder_children(root.id)[0]
    assert folder.parent_id == heatmap.id


def test_resolve_taxonomy_folder_rejects_unknown_segments(
    store: InMemoryGraphStore,
    config: ReconciliationConfig,
) -> None:
    root = find_root_folder(store, "Strategy")

    with pytest.raises(LookupFailure):
        resolve_taxonomy_folder(store, root, "Marketing", config)
