"""Row and record shapes flowing through reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

type MergedRecord = dict[str, str]


def cell_text(value: object) -> str:
    """Render a tabular cell as text; ``None`` becomes the empty string."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class SourceRow:
    """One tabular row: ordered fields and its 1-based position in the source."""

    fields: dict[str, object] = field(default_factory=dict["str", "object"])
    sequence: int = 1

    def text(self, column: str) -> str:
        return cell_text(self.fields.get(column))

    def has(self, column: str) -> bool:
        return column in self.fields


@dataclass(frozen=True, slots=True)
class GroupingResult:
    """Chosen grouping relationship and its far end.

    The all-empty instance (``GroupingResult.EMPTY``) stands for "no grouping".
    """

    target_name: str = ""
    target_id: str = ""
    rel_type: str = ""
    rel_id: str = ""

    EMPTY: ClassVar[GroupingResult]

    @property
    def is_empty(self) -> bool:
        return not (self.target_id or self.rel_id)


GroupingResult.EMPTY = GroupingResult()
