"""Identity assignment from a composite key of record columns."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from modelsync.domain.model import MergedRecord

IDENTITY_NAMESPACE: Final[uuid.UUID] = uuid.UUID("6f1c3f0e-4c55-4b8e-9a51-5d1f0f8a2c11")
log = logging.getLogger(__name__)


@dataclass(slots=True)
class IdentityAssignment:
    generated: int = 0
    reused: int = 0
    kept: int = 0


def composite_key(record: MergedRecord, columns: Sequence[str]) -> str:
    return "|".join(record.get(column, "") for column in columns)


def _new_identifier(composite: str, *, stable: bool) -> str:
    if stable:
        return str(uuid.uuid5(IDENTITY_NAMESPACE, composite))
    return str(uuid.uuid4())


def assign_identities(
    records: Sequence[MergedRecord],
    *,
    key_columns: Sequence[str],
    output_column: str,
    stable: bool = False,
) -> IdentityAssignment:
    """Write an identifier into ``output_column`` of every record.

    Records with the same composite key share one identifier within this call.
    A record that already carries an identifier keeps it, and the first such
    identifier seen for a composite is reused by later records with that key.
    The cache lives only for this call; pass ``stable=True`` to derive
    identifiers from the composite so they survive across runs.
    """

    result = IdentityAssignment()
    identifiers: dict[str, str] = {}

    for record in records:
        existing = record.get(output_column, "").strip()
        if existing:
            identifiers.setdefault(composite_key(record, key_columns), existing)

    for record in records:
        composite = composite_key(record, key_columns)
        if record.get(output_column, "").strip():
            result.kept += 1
            continue
        identifier = identifiers.get(composite)
        if identifier is None:
            identifier = _new_identifier(composite, stable=stable)
            identifiers[composite] = identifier
            result.generated += 1
        else:
            result.reused += 1
        record[output_column] = identifier

    log.debug(
        "Identities: generated=%s reused=%s kept=%s",
        result.generated,
        result.reused,
        result.kept,
    )
    return result
