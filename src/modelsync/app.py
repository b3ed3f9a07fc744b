"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from modelsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    is_started,
    seed_category_roots,
    startup,
)
from modelsync.adapters.tabular import load_sheet, write_csv
from modelsync.config import get_reconciliation_config
from modelsync.domain.reconciliation import ReconciliationContext, ReconciliationResult, reconcile
from modelsync.domain.synchronization import (
    FolderSyncResult,
    SyncSummary,
    ensure_taxonomy_folders,
    sync_records,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from modelsync.config import ReconciliationConfig
    from modelsync.domain.model import MergedRecord
    from modelsync.domain.ports import GraphUnitOfWork, TabularSheet

type UnitOfWorkFactory = Callable[[], GraphUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class InitialiseResult:
    roots_created: list[str] = field(default_factory=list["str"])
    folders: FolderSyncResult = field(default_factory=FolderSyncResult)


@dataclass(slots=True)
class SyncSheetResult:
    reconciliation: ReconciliationResult
    summary: SyncSummary
    written: int = 0


def _resolve_unit_of_work(
    unit_of_work_factory: UnitOfWorkFactory | None,
    database_uri: str | None,
) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup(database_uri=database_uri)
    return SqlAlchemyUnitOfWork


def _read_sheet(
    sheet_path: Path,
    config: ReconciliationConfig,
    sheet_name: str | None,
) -> TabularSheet:
    sheet = load_sheet(
        sheet_path,
        header_row=max(config.skip_rows - 1, 0),
        sheet_name=sheet_name,
    )
    log.info("Loaded sheet %r with %s raw row(s)", sheet.name, len(sheet.grid))
    return sheet


def record_headers(records: Sequence[MergedRecord], config: ReconciliationConfig) -> list[str]:
    """Recognised fields in configured order, then any extra keys in first-seen order."""

    headers = dict.fromkeys(config.recognized_fields)
    for record in records:
        headers.update(dict.fromkeys(record))
    return list(headers)


def initialise_model(
    *,
    config: ReconciliationConfig | None = None,
    database_uri: str | None = None,
    unit_of_work_factory: Callable[[], SqlAlchemyUnitOfWork] | None = None,
) -> InitialiseResult:
    """Create the store tables, the category roots and the taxonomy folders."""

    effective_config = config or get_reconciliation_config()
    if unit_of_work_factory is None and not is_started():
        startup(database_uri=database_uri)
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork

    result = InitialiseResult()
    with effective_uow() as uow:
        created = seed_category_roots(uow.store, effective_config.category_roots)
        result.roots_created = [folder.name for folder in created]
        result.folders = ensure_taxonomy_folders(uow.store, effective_config)
        uow.commit()

    log.info(
        "Initialised model: roots_created=%s, folders_created=%s, folders_reused=%s",
        len(result.roots_created),
        result.folders.created,
        result.folders.reused,
    )
    return result


def export_sheet(
    sheet_path: Path,
    output: Path,
    *,
    config: ReconciliationConfig | None = None,
    sheet_name: str | None = None,
    database_uri: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReconciliationResult:
    """Reconcile a sheet against the model and write merged records to ``output``.

    The model is only read; nothing is committed.
    """

    effective_config = config or get_reconciliation_config()
    effective_uow = _resolve_unit_of_work(unit_of_work_factory, database_uri)
    sheet = _read_sheet(sheet_path, effective_config, sheet_name)

    with effective_uow() as uow:
        result = reconcile(sheet.grid, uow.store, effective_config, context=ReconciliationContext())

    written = write_csv(output, record_headers(result.records, effective_config), result.records)
    log.info("Exported %s record(s) to %s", written, output)
    return result


def sync_sheet(
    sheet_path: Path,
    *,
    output: Path | None = None,
    config: ReconciliationConfig | None = None,
    sheet_name: str | None = None,
    view_suffix: str | None = None,
    database_uri: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncSheetResult:
    """Reconcile a sheet, write the records back into the model and commit."""

    effective_config = config or get_reconciliation_config()
    effective_uow = _resolve_unit_of_work(unit_of_work_factory, database_uri)
    sheet = _read_sheet(sheet_path, effective_config, sheet_name)
    log.info("Starting sync of %s", sheet_path)

    with effective_uow() as uow:
        reconciliation = reconcile(
            sheet.grid, uow.store, effective_config, context=ReconciliationContext()
        )
        summary = sync_records(
            reconciliation.records,
            uow.store,
            effective_config,
            view_suffix=view_suffix,
        )
        uow.commit()

    result = SyncSheetResult(reconciliation=reconciliation, summary=summary)
    if output is not None:
        result.written = write_csv(
            output,
            record_headers(reconciliation.records, effective_config),
            reconciliation.records,
        )
        log.info("Wrote %s merged record(s) to %s", result.written, output)
    return result
