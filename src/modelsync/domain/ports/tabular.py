"""Ports for tabular sources and sinks."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from modelsync.domain.errors import ValidationError
from modelsync.domain.model import cell_text

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(slots=True)
class TabularSheet:
    """Raw 2D grid read from a sheet, plus the index of its header row."""

    grid: list[list[object]] = field(default_factory=list["list[object]"])
    header_row: int = 0
    name: str = ""

    @property
    def header(self) -> tuple[str, ...]:
        if self.header_row >= len(self.grid):
            return ()
        return tuple(cell_text(cell).strip() for cell in self.grid[self.header_row])

    def column_index(self, column: str) -> int:
        """Return the 0-based position of ``column`` in the header row."""

        try:
            return self.header.index(column)
        except ValueError:
            raise ValidationError(
                f"Column {column!r} not found in header of sheet {self.name or '<unnamed>'}"
            ) from None


class SheetReader(Protocol):
    def __call__(self, path: Path, *, header_row: int = ...) -> TabularSheet: ...


class RecordWriter(Protocol):
    def __call__(
        self,
        target: Path,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, object]],
    ) -> int: ...
