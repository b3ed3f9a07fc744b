"""Row normalization: turn raw tabular payloads into ``SourceRow`` sequences.

Raw input arrives in one of three shapes. The shape is decided once by
``classify_payload``; everything downstream works on ``SourceRow`` only.

- ``GridPayload``: a list of row arrays whose leading rows (title, header) are
  dropped before numbering
- ``RecordsPayload``: a list of row mappings, already keyed by column
- ``SingleRecordPayload``: one row mapping
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from modelsync.domain.errors import ShapeError, ValidationError
from modelsync.domain.model import SourceRow, cell_text

DEFAULT_SKIP_ROWS = 2
log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GridPayload:
    rows: tuple[Sequence[object], ...]


@dataclass(frozen=True, slots=True)
class RecordsPayload:
    records: tuple[Mapping[str, object], ...]


@dataclass(frozen=True, slots=True)
class SingleRecordPayload:
    record: Mapping[str, object]


type TabularPayload = GridPayload | RecordsPayload | SingleRecordPayload


@dataclass(frozen=True, slots=True)
class NormalizedRows:
    """Normalized rows plus the column names they were read with."""

    rows: tuple[SourceRow, ...] = ()
    headers: tuple[str, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.rows)

    def require_columns(self, columns: Sequence[str]) -> None:
        """Raise ``ValidationError`` if any of ``columns`` is absent from the headers."""

        missing = [column for column in columns if column not in self.headers]
        if missing:
            raise ValidationError(f"Required columns missing from source: {', '.join(missing)}")


def _is_row_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def classify_payload(raw: object) -> TabularPayload:
    """Decide the payload shape once, at the entry point."""

    if isinstance(raw, GridPayload | RecordsPayload | SingleRecordPayload):
        return raw
    if isinstance(raw, Mapping):
        return SingleRecordPayload(record=raw)
    if not _is_row_array(raw):
        raise ShapeError(f"Unsupported tabular payload of type {type(raw).__name__}")

    items = tuple(raw)  # type: ignore[arg-type]
    if not items:
        return RecordsPayload(records=())
    if isinstance(items[0], Mapping):
        if not all(isinstance(item, Mapping) for item in items):
            raise ShapeError("Mixed row shapes: expected every row to be a mapping")
        return RecordsPayload(records=items)
    if not all(_is_row_array(item) for item in items):
        raise ShapeError("Mixed row shapes: expected every row to be an array")
    return GridPayload(rows=items)


def normalize_rows(
    payload: TabularPayload | object,
    *,
    skip_rows: int = DEFAULT_SKIP_ROWS,
    header: Sequence[str] | None = None,
) -> NormalizedRows:
    """Return ``SourceRow`` objects in source order with 1-based sequence numbers."""

    classified = classify_payload(payload)
    match classified:
        case SingleRecordPayload(record=record):
            fields = dict(record)
            return NormalizedRows(
                rows=(SourceRow(fields=fields, sequence=1),),
                headers=tuple(fields),
            )
        case RecordsPayload(records=records):
            return _normalize_records(records)
        case GridPayload(rows=rows):
            return _normalize_grid(rows, skip_rows=skip_rows, header=header)


def _normalize_records(records: tuple[Mapping[str, object], ...]) -> NormalizedRows:
    headers: dict[str, None] = {}
    rows: list[SourceRow] = []
    for position, record in enumerate(records, start=1):
        fields = dict(record)
        headers.update(dict.fromkeys(fields))
        rows.append(SourceRow(fields=fields, sequence=position))
    return NormalizedRows(rows=tuple(rows), headers=tuple(headers))


def _normalize_grid(
    grid: tuple[Sequence[object], ...],
    *,
    skip_rows: int,
    header: Sequence[str] | None,
) -> NormalizedRows:
    if skip_rows < 0:
        raise ValueError("skip_rows must be non-negative")

    columns = _grid_header(grid, skip_rows=skip_rows, header=header)
    rows: list[SourceRow] = []
    for offset, raw_row in enumerate(grid[skip_rows:]):
        cells = list(raw_row)
        if all(not cell_text(cell).strip() for cell in cells):
            continue
        if len(cells) > len(columns):
            log.warning(
                "Row %s has %s cells but only %s columns; extra cells dropped",
                offset + skip_rows + 1,
                len(cells),
                len(columns),
            )
        padded = cells + [""] * (len(columns) - len(cells))
        fields = {column: padded[index] for index, column in enumerate(columns)}
        rows.append(SourceRow(fields=fields, sequence=offset + skip_rows + 1))
    return NormalizedRows(rows=tuple(rows), headers=columns)


def _grid_header(
    grid: tuple[Sequence[object], ...],
    *,
    skip_rows: int,
    header: Sequence[str] | None,
) -> tuple[str, ...]:
    if header is not None:
        return tuple(header)
    if skip_rows == 0 or len(grid) < skip_rows:
        width = max((len(row) for row in grid), default=0)
        return tuple(str(index) for index in range(1, width + 1))
    return tuple(cell_text(cell).strip() for cell in grid[skip_rows - 1])
