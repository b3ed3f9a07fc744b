from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from modelsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    seed_category_roots,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_store_is_only_available_inside_the_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.store

    with uow:
        assert uow.store.nodes() == ()


def test_committed_changes_are_visible_to_the_next_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        node = uow.store.create_node("capability", "Payments")
        uow.store.set_property(node.id, "Level", "1")
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        (loaded,) = uow.store.nodes()
        assert loaded.id == node.id
        assert loaded.properties == {"Level": "1"}


def test_errors_roll_back_the_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        uow.store.create_node("capability", "Payments")
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.store.nodes() == ()


def test_seed_category_roots_is_idempotent(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        first = seed_category_roots(uow.store, ["Strategy", "Business"])
        second = seed_category_roots(uow.store, ["Strategy", "Business", "Application"])
        uow.commit()

    assert [folder.name for folder in first] == ["Strategy", "Business"]
    assert [folder.name for folder in second] == ["Application"]
    with SqlAlchemyUnitOfWork() as uow:
        assert [folder.name for folder in uow.store.root_folders()] == [
            "Strategy",
            "Business",
            "Application",
        ]
