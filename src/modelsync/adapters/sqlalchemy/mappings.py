"""SQLAlchemy table metadata for the graph model store."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


def new_element_id() -> str:
    return f"id-{uuid.uuid4().hex}"


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# ``seq`` columns keep insertion order, which is the store iteration order.

folder_table = Table(
    "folder",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False, unique=True, default=new_element_id),
    Column("name", String, nullable=False),
    Column("parent_id", String, ForeignKey("folder.id"), nullable=True),
    Index("ix_folder_parent_name", "parent_id", "name"),
)

node_table = Table(
    "node",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False, unique=True, default=new_element_id),
    Column("type", String, nullable=False),
    Column("name", String, nullable=False),
    Column("documentation", Text, nullable=False, default=""),
    Column("folder_id", String, ForeignKey("folder.id"), nullable=True),
    Index("ix_node_type_name", "type", "name"),
)

node_property_table = Table(
    "node_property",
    metadata,
    Column("node_id", String, ForeignKey("node.id", ondelete="CASCADE"), nullable=False),
    Column("key", String, nullable=False),
    Column("value", JSON, nullable=False),
    PrimaryKeyConstraint("node_id", "key"),
)

relationship_table = Table(
    "relationship",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False, unique=True, default=new_element_id),
    Column("type", String, nullable=False),
    Column("source_id", String, ForeignKey("node.id"), nullable=False),
    Column("target_id", String, ForeignKey("node.id"), nullable=False),
)

view_table = Table(
    "diagram",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False, unique=True, default=new_element_id),
    Column("name", String, nullable=False, index=True),
)

view_child_table = Table(
    "diagram_child",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String, nullable=False, unique=True, default=new_element_id),
    Column("view_id", String, ForeignKey("diagram.id"), nullable=False, index=True),
    Column("node_id", String, ForeignKey("node.id"), nullable=True),
    Column("x", Integer, nullable=True),
    Column("y", Integer, nullable=True),
    Column("width", Integer, nullable=True),
    Column("height", Integer, nullable=True),
)


def create_all_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""

    metadata.create_all(engine, checkfirst=True)
    log.debug("Ensured graph store tables on %s", engine.url.render_as_string(hide_password=True))
