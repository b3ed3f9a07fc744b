"""XLSX sheet reading via openpyxl."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from openpyxl import load_workbook

from modelsync.domain.errors import ValidationError
from modelsync.domain.ports import TabularSheet

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


def read_xlsx_grid(
    path: Path,
    *,
    header_row: int = 0,
    sheet_name: str | None = None,
) -> TabularSheet:
    """Read one worksheet (the active one unless ``sheet_name`` is given) into a grid."""

    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        if sheet_name is None:
            worksheet = workbook.active
        elif sheet_name in workbook.sheetnames:
            worksheet = workbook[sheet_name]
        else:
            raise ValidationError(
                f"Worksheet {sheet_name!r} not found in {path.name}; "
                f"available: {', '.join(workbook.sheetnames)}"
            )
        if worksheet is None:
            raise ValidationError(f"Workbook {path.name} has no worksheets")
        grid: list[list[object]] = [
            list(row) for row in worksheet.iter_rows(values_only=True)  # type: ignore[union-attr]
        ]
        title = worksheet.title
    finally:
        workbook.close()

    log.debug("Read %s row(s) from worksheet %r of %s", len(grid), title, path)
    return TabularSheet(grid=grid, header_row=header_row, name=title)
