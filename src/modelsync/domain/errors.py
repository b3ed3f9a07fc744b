"""Error kinds raised by the reconciliation and synchronisation stages.

Each kind also derives from the closest builtin so callers that only know
about ``ValueError``/``LookupError``/``TypeError`` keep working.
"""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for reconciliation failures."""


class ValidationError(ReconciliationError, ValueError):
    """A record or source is missing a required field or column.

    Fatal to the single entity, not to the batch.
    """


class LookupFailure(ReconciliationError, LookupError):
    """A folder, node or view expected to exist could not be found.

    Callers degrade to a fallback and log a warning.
    """


class MutationFailure(ReconciliationError, RuntimeError):
    """The graph store rejected a create or set operation."""


class ShapeError(ReconciliationError, TypeError):
    """Input cannot be interpreted at all; fatal to the whole run."""
