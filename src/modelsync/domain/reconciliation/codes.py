"""Reference codes: short abbreviations of a source column combined with a reference.

Code rules, applied per distinct non-empty source value:

- one word: its first three characters (``Security`` -> ``SEC``)
- several words: one initial per word (``Application Services`` -> ``AS``)

When two distinct values end up with the same code, every value sharing it is
re-coded with two characters per word (one for single-letter words). That
upgrade runs once per cache build; a collision introduced by the upgrade
itself is not detected again.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .text import normalize_text

if TYPE_CHECKING:
    from modelsync.config import CodeMapping
    from modelsync.domain.model import MergedRecord

    from .context import ReconciliationContext

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CodeCache:
    """Distinct source value -> code, plus how many values share each code."""

    signature: tuple[str, ...]
    codes: dict[str, str] = field(default_factory=dict["str", "str"])
    counts: dict[str, int] = field(default_factory=dict["str", "int"])

    def code_for(self, value: str) -> str:
        return self.codes.get(value.strip(), "")

    def collisions(self) -> dict[str, int]:
        return {code: count for code, count in self.counts.items() if count > 1}


def _words(value: str) -> list[str]:
    return value.split()


def initial_code(value: str) -> str:
    words = _words(value)
    if not words:
        return ""
    if len(words) == 1:
        return words[0][:3].upper()
    return "".join(word[0] for word in words).upper()


def upgraded_code(value: str) -> str:
    words = _words(value)
    return "".join(word[:1] if len(word) == 1 else word[:2] for word in words).upper()


def build_code_cache(values: Iterable[str], *, signature: tuple[str, ...] = ()) -> CodeCache:
    """Assign codes to the distinct non-empty ``values`` and resolve collisions once."""

    distinct = list(dict.fromkeys(value.strip() for value in values if value and value.strip()))
    codes = {value: initial_code(value) for value in distinct}

    shared = {code for code, count in Counter(codes.values()).items() if count > 1}
    if shared:
        for value, code in codes.items():
            if code in shared:
                codes[value] = upgraded_code(value)
        log.debug("Upgraded reference codes for %s colliding code(s): %s", len(shared), shared)

    cache = CodeCache(signature=signature, codes=codes, counts=dict(Counter(codes.values())))
    remaining = cache.collisions()
    if remaining:
        log.warning("Reference codes still shared after upgrade: %s", sorted(remaining))
    return cache


def combine_code(source: str, reference: str, code: str) -> str:
    """Combine a code with its reference value into one display string."""

    if source.strip().casefold() == reference.strip().casefold():
        return reference
    if not code and not reference:
        return ""
    if not reference:
        return code
    if not code:
        return reference
    if normalize_text(code) == normalize_text(reference):
        return reference
    return f"{code}-{reference}"


def _first_reference(record: MergedRecord, columns: Sequence[str]) -> str:
    for column in columns:
        value = record.get(column, "")
        if value.strip():
            return value
    return ""


def apply_reference_codes(
    records: Sequence[MergedRecord],
    mapping: CodeMapping,
    context: ReconciliationContext,
) -> CodeCache:
    """Fill ``mapping.output_column`` for every record.

    The context's cache is reused when it was built for the same mapping
    signature; any other signature rebuilds it from ``records``.
    """

    cache = context.code_cache
    if cache is None or cache.signature != mapping.signature:
        cache = build_code_cache(
            (record.get(mapping.source_column, "") for record in records),
            signature=mapping.signature,
        )
        context.code_cache = cache

    for record in records:
        source = record.get(mapping.source_column, "")
        reference = _first_reference(record, mapping.reference_columns)
        record[mapping.output_column] = combine_code(source, reference, cache.code_for(source))
    return cache
