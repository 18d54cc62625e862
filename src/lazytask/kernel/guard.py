"""Settlement guards for combining concurrently forked Tasks.

A guard is the only shared mutable state of a combination. It is created
before any side is forked, lives for a single fork of the combined Task and
lets exactly one outcome through to the output channels:

- the first failure from any side wins;
- success is reported once every side has produced its payload;
- every completion after settlement is discarded.

State is mutated under a lock so sides may complete from different threads.
Output channels are invoked after the lock is released, which keeps
synchronous and reentrant completion safe.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

logger = logging.getLogger(__name__)

_MISSING: Any = object()


@dataclass
class _Guard:
    reject: Callable[[Any], None]
    resolve: Callable[[Any], None]
    status: Literal["pending", "failed", "resolved"] = "pending"
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def fail(self, err: Any) -> None:
        with self._lock:
            if self.status != "pending":
                logger.debug("Discarding failure after %s settlement: %r", self.status, err)
                return
            self.status = "failed"
        self.reject(err)


@dataclass
class SettlementGuard(_Guard):
    """Guard for one ``ap``/``ap_to`` combination: a function side and a value side."""

    function: Any = _MISSING
    value: Any = _MISSING

    @property
    def has_function(self) -> bool:
        return self.function is not _MISSING

    @property
    def has_value(self) -> bool:
        return self.value is not _MISSING

    def accept_function(self, fn: Callable[[Any], Any]) -> None:
        self._accept("function", fn)

    def accept_value(self, value: Any) -> None:
        self._accept("value", value)

    def _accept(self, side: Literal["function", "value"], payload: Any) -> None:
        with self._lock:
            if self.status != "pending":
                logger.debug("Discarding %s after %s settlement", side, self.status)
                return
            if getattr(self, side) is not _MISSING:
                logger.debug("Ignoring repeated %s from the same side", side)
                return
            setattr(self, side, payload)
            if not (self.has_function and self.has_value):
                return
            self.status = "resolved"
            fn, value = self.function, self.value
        self.resolve(fn(value))


@dataclass
class GatherGuard(_Guard):
    """Guard for an n-ary parallel combination; resolves with values in slot order."""

    size: int = 0
    _slots: list[Any] = field(init=False, repr=False)
    _remaining: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._slots = [_MISSING] * self.size
        self._remaining = self.size

    def slot(self, index: int) -> Callable[[Any], None]:
        """Success channel for the item at ``index``."""
        return lambda value: self.accept(index, value)

    def accept(self, index: int, value: Any) -> None:
        with self._lock:
            if self.status != "pending":
                logger.debug("Discarding item %d after %s settlement", index, self.status)
                return
            if self._slots[index] is not _MISSING:
                logger.debug("Ignoring repeated value for item %d", index)
                return
            self._slots[index] = value
            self._remaining -= 1
            if self._remaining:
                return
            self.status = "resolved"
            values = list(self._slots)
        self.resolve(values)
