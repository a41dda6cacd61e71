"""Error taxonomy for the questcore engine."""

from __future__ import annotations


class QuestCoreError(Exception):
    """Base class for errors raised by the engine."""
    pass


class PersistenceError(QuestCoreError):
    """
    Raised when progress or curriculum state cannot be read from or written to storage.

    Callers should show a generic retry message. A mutating call that raises this
    has not changed any in-memory state.
    """
    pass
