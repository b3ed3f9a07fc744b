"""Tabular file adapters (CSV and XLSX)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsync.domain.errors import ShapeError

from .csv_codec import read_csv_grid, write_csv
from .xlsx import read_xlsx_grid

if TYPE_CHECKING:
    from pathlib import Path

    from modelsync.domain.ports import TabularSheet

CSV_SUFFIXES = frozenset({".csv"})
XLSX_SUFFIXES = frozenset({".xlsx", ".xlsm"})


def load_sheet(
    path: Path,
    *,
    header_row: int = 0,
    sheet_name: str | None = None,
) -> TabularSheet:
    """Read a sheet from ``path``, choosing the codec by file suffix."""

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        return read_csv_grid(path, header_row=header_row)
    if suffix in XLSX_SUFFIXES:
        return read_xlsx_grid(path, header_row=header_row, sheet_name=sheet_name)
    raise ShapeError(f"Unsupported sheet format {path.suffix or '<none>'!r} for {path.name}")


__all__ = ["load_sheet", "read_csv_grid", "read_xlsx_grid", "write_csv"]
