"""Node upsert: find-or-create a model node from a merged record.

A record carrying the element id of a matched node updates that node even
when the sheet spells its name differently.

Only node creation is fatal for a record. Documentation, each property and
the folder placement are applied best-effort; their failures are logged and
reported on the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from modelsync.domain.errors import MutationFailure, ValidationError

from .folders import resolve_taxonomy_folder

if TYPE_CHECKING:
    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import Folder, GraphNode, MergedRecord
    from modelsync.domain.ports import GraphStore

log = logging.getLogger(__name__)


class UpsertStatus(StrEnum):
    ADDED = "added"
    UPDATED = "updated"


class PropertyStatus(StrEnum):
    SET = "set"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class PropertyOutcome:
    key: str
    status: PropertyStatus
    error: str | None = None


@dataclass(slots=True, kw_only=True)
class UpsertOutcome:
    status: UpsertStatus
    node: GraphNode
    folder: Folder
    moved: bool = False
    documentation_set: bool = False
    properties: list[PropertyOutcome] = field(default_factory=list["PropertyOutcome"])

    @property
    def failed_properties(self) -> list[str]:
        return [item.key for item in self.properties if item.status is PropertyStatus.FAILED]


def record_identity(record: MergedRecord, config: ReconciliationConfig) -> tuple[str, str]:
    """Return ``(type, name)`` for ``record``; the type falls back to the default."""

    name_column = config.column_for("name") or config.name_column
    type_column = config.column_for("type") or config.type_column
    name = record.get(name_column, "").strip()
    node_type = record.get(type_column, "").strip() or config.default_entity_type
    return node_type, name


def find_node(
    store: GraphStore,
    node_type: str,
    name: str,
    *,
    element_id: str = "",
) -> GraphNode | None:
    """Node of ``node_type`` with id ``element_id``, else the first named exactly ``name``."""

    if element_id:
        by_id = store.nodes(lambda node: node.id == element_id and node.type == node_type)
        if by_id:
            return by_id[0]
        log.debug("Element %s is not a %s; looking up %r by name", element_id, node_type, name)
    candidates = store.nodes(lambda node: node.type == node_type and node.name == name)
    return candidates[0] if candidates else None


def upsert_node(
    store: GraphStore,
    record: MergedRecord,
    root: Folder,
    config: ReconciliationConfig,
) -> UpsertOutcome:
    """Create or update the node described by ``record`` and file it under ``root``."""

    node_type, name = record_identity(record, config)
    if not name:
        raise ValidationError("Record has no name")
    if not node_type:
        raise ValidationError(f"Record {name!r} has no type")

    element_id = record.get(config.element_id_column, "").strip()
    node = find_node(store, node_type, name, element_id=element_id)
    if node is not None:
        status = UpsertStatus.UPDATED
    else:
        try:
            node = store.create_node(node_type, name)
        except Exception as exc:
            raise MutationFailure(f"Could not create {node_type} {name!r}: {exc}") from exc
        status = UpsertStatus.ADDED
        log.debug("Created %s %r as %s", node_type, name, node.id)

    documentation_set = _apply_documentation(store, node, record, config)
    properties = _apply_properties(store, node, record, config)
    folder = _target_folder(store, record, root, config)
    moved = _ensure_membership(store, node, folder)

    return UpsertOutcome(
        status=status,
        node=node,
        folder=folder,
        moved=moved,
        documentation_set=documentation_set,
        properties=properties,
    )


def _apply_documentation(
    store: GraphStore,
    node: GraphNode,
    record: MergedRecord,
    config: ReconciliationConfig,
) -> bool:
    column = config.column_for("documentation") or config.description_column
    documentation = record.get(column, "")
    if not documentation:
        return False
    try:
        if store.get_documentation(node.id) == documentation:
            return False
        store.set_documentation(node.id, documentation)
    except Exception as exc:  # noqa: BLE001
        log.warning("Could not set documentation on %s (%s): %s", node.name, node.id, exc)
        return False
    return True


def _apply_properties(
    store: GraphStore,
    node: GraphNode,
    record: MergedRecord,
    config: ReconciliationConfig,
) -> list[PropertyOutcome]:
    outcomes: list[PropertyOutcome] = []
    for key in config.property_columns:
        value = record.get(key, "")
        if not value:
            continue
        try:
            if store.get_property(node.id, key) == value:
                outcomes.append(PropertyOutcome(key=key, status=PropertyStatus.UNCHANGED))
                continue
            store.set_property(node.id, key, value)
        except Exception as exc:  # noqa: BLE001
            log.warning("Could not set property %r on %s (%s): %s", key, node.name, node.id, exc)
            outcomes.append(PropertyOutcome(key=key, status=PropertyStatus.FAILED, error=str(exc)))
            continue
        outcomes.append(PropertyOutcome(key=key, status=PropertyStatus.SET))
    return outcomes


def _target_folder(
    store: GraphStore,
    record: MergedRecord,
    root: Folder,
    config: ReconciliationConfig,
) -> Folder:
    column = config.column_for("taxonomy")
    taxonomy = record.get(column, "").strip() if column else ""
    if not taxonomy:
        return root
    try:
        return resolve_taxonomy_folder(store, root, taxonomy, config)
    except Exception as exc:  # noqa: BLE001
        log.warning("Falling back to folder %r for taxonomy %r: %s", root.name, taxonomy, exc)
        return root


def _ensure_membership(store: GraphStore, node: GraphNode, folder: Folder) -> bool:
    if any(member.id == node.id for member in store.folder_members(folder.id)):
        return False
    store.move_to_folder(folder.id, node.id)
    return True
