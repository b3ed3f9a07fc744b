"""CSV reading and writing for sheets and merged records."""

from __future__ import annotations

import csv
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import IO, TYPE_CHECKING

from modelsync.domain.model import cell_text
from modelsync.domain.ports import TabularSheet

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

log = logging.getLogger(__name__)


def read_csv_grid(
    path: Path,
    *,
    header_row: int = 0,
    delimiter: str = ",",
) -> TabularSheet:
    """Read ``path`` into a raw grid; cells stay strings."""

    with path.open(newline="", encoding="utf-8-sig") as handle:
        grid: list[list[object]] = [list(row) for row in csv.reader(handle, delimiter=delimiter)]
    log.debug("Read %s row(s) from %s", len(grid), path)
    return TabularSheet(grid=grid, header_row=header_row, name=path.stem)


def write_csv(
    target: Path | IO[str],
    headers: Sequence[str],
    rows: Sequence[Mapping[str, object]],
    *,
    delimiter: str = ",",
) -> int:
    """Write ``rows`` under ``headers``; every field is quoted. Returns the row count.

    Fields missing from a row, or ``None``, are written as empty strings.
    """

    with ExitStack() as stack:
        if isinstance(target, Path):
            target.parent.mkdir(parents=True, exist_ok=True)
            handle: IO[str] = stack.enter_context(target.open("w", newline="", encoding="utf-8"))
        else:
            handle = target
        writer = csv.writer(
            handle,
            delimiter=delimiter,
            quoting=csv.QUOTE_ALL,
            doublequote=True,
            lineterminator="\n",
        )
        writer.writerow(headers)
        for row in rows:
            writer.writerow([cell_text(row.get(column)) for column in headers])
    log.debug("Wrote %s record(s) with %s column(s)", len(rows), len(headers))
    return len(rows)


if TYPE_CHECKING:
    from modelsync.domain.ports import RecordWriter, SheetReader

    _reader_check: SheetReader = read_csv_grid
    _writer_check: RecordWriter = write_csv
