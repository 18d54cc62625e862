"""Fork and settlement events of traced Tasks.

A Trace only observes: nothing recorded here feeds back into the values
flowing through a Task. Every ``traced`` fork adds one fork event, and its
settlement adds one settle event pointing back at that fork.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """One recorded event. Settle events carry the fork id as ``parent_id``."""

    action: str
    id: int = 0
    parent_id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    info: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None


class Trace:
    """Event log shared by any number of traced Tasks.

    Ids are positions in the log, so they restart at 0 after ``clear``.
    Forks may settle on worker threads; every access to the log goes
    through one lock.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []
        self._lock = threading.Lock()

    def record(
        self,
        action: str,
        info: dict[str, Any] | None = None,
        parent_id: int | None = None,
        duration_ms: float | None = None,
    ) -> int | None:
        """Append an event and return its id, or ``None`` when disabled."""
        if not self.enabled:
            return None
        with self._lock:
            event = Evidence(
                action=action,
                id=len(self._events),
                parent_id=parent_id,
                info=dict(info or {}),
                duration_ms=duration_ms,
            )
            self._events.append(event)
        return event.id

    def get_events(self) -> list[Evidence]:
        with self._lock:
            return list(self._events)

    def find_all(self, action: str) -> list[Evidence]:
        return [event for event in self.get_events() if event.action == action]

    def as_tree(self) -> dict[int | None, list[int]]:
        """Group event ids under their parent id; top-level forks sit under ``None``."""
        tree: defaultdict[int | None, list[int]] = defaultdict(list)
        for event in self.get_events():
            tree[event.parent_id].append(event.id)
        return dict(tree)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
