from __future__ import annotations

import csv
from typing import TYPE_CHECKING

from modelsync.app import export_sheet, initialise_model, record_headers, sync_sheet
from modelsync.config import MODEL_ONLY, ReconciliationConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from modelsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

SHEET = """Capability Heat Map
UUID,Level,Domain,Capability,Name,Description,Taxonomy Classification,Owner
,1,Finance,,Payments,Moves money,Finance,Ops
,2,Finance,Payments,Ledger,,,
,1,Security,,Firewall,Filters traffic,Security,
"""


def _sheet(tmp_path: Path) -> Path:
    path = tmp_path / "heatmap.csv"
    path.write_text(SHEET, encoding="utf-8")
    return path


def _read(path: Path) -> list[dict[str, str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.DictReader(handle))


def test_initialise_model_is_repeatable(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    config = ReconciliationConfig()

    first = initialise_model(config=config, unit_of_work_factory=sqlite_unit_of_work)
    second = initialise_model(config=config, unit_of_work_factory=sqlite_unit_of_work)

    assert first.roots_created == list(config.category_roots)
    assert first.folders.created == len(config.category_roots) * (1 + len(config.taxonomy_segments))
    assert second.roots_created == []
    assert second.folders.created == 0


def test_sync_sheet_commits_nodes_and_writes_records(
    tmp_path: Path,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    initialise_model(unit_of_work_factory=sqlite_unit_of_work)
    output = tmp_path / "merged.csv"

    result = sync_sheet(_sheet(tmp_path), output=output, unit_of_work_factory=sqlite_unit_of_work)

    assert (result.summary.added, result.summary.failed) == (3, 0)
    assert result.written == 3
    with sqlite_unit_of_work() as uow:
        assert sorted(node.name for node in uow.store.nodes()) == ["Firewall", "Ledger", "Payments"]
        assert {view.name for view in uow.store.views()} == {"Finance HeatMap", "Security HeatMap"}
    rows = _read(output)
    assert [row["Name"] for row in rows] == ["Payments", "Ledger", "Firewall"]
    assert rows[0]["Reference Code"] == "FIN-Payments"

    again = sync_sheet(_sheet(tmp_path), unit_of_work_factory=sqlite_unit_of_work)

    assert (again.summary.added, again.summary.updated) == (0, 3)
    assert again.reconciliation.matched_rows == 3
    assert again.written == 0


def test_export_sheet_reads_without_writing(
    tmp_path: Path,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    initialise_model(unit_of_work_factory=sqlite_unit_of_work)
    with sqlite_unit_of_work() as uow:
        uow.store.create_node("capability", "Legacy Mainframe")
        uow.commit()
    output = tmp_path / "export.csv"

    result = export_sheet(_sheet(tmp_path), output, unit_of_work_factory=sqlite_unit_of_work)

    rows = _read(output)
    assert len(rows) == len(result.records) == 4
    assert rows[-1][MODEL_ONLY] == "1"
    assert rows[-1]["Domain"] == "Legacy Mainframe"
    assert list(rows[0]) == record_headers(result.records, ReconciliationConfig())
    with sqlite_unit_of_work() as uow:
        assert [node.name for node in uow.store.nodes()] == ["Legacy Mainframe"]


def test_record_headers_follow_configured_order() -> None:
    config = ReconciliationConfig()

    headers = record_headers([{"Extra": "x", "Name": "A"}], config)

    assert headers[: len(config.recognized_fields)] == list(config.recognized_fields)
    assert headers[-1] == "Extra"
