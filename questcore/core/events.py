"""
State-change notifications.

Each store owns its own ChangeNotifier; there is no global bus. Listeners are
called synchronously after a mutation has been persisted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class StateChanged:
    """Emitted after a successful mutating call."""

    source: str  # 'progress' or 'curriculum'
    action: str  # e.g. 'session_recorded', 'level_completed', 'reset'
    subject: str | None = None


Listener = Callable[[StateChanged], None]


class ChangeNotifier:
    """Holds listeners for one store and fans out StateChanged events."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: StateChanged) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:  # Listener bugs must not undo a committed mutation
                logger.warning(f"State change listener failed for {event.action}: {e}")

    def __len__(self) -> int:
        return len(self._listeners)
