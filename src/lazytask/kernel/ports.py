"""Port protocols for lazytask - the seams to external primitives."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

L = TypeVar("L")
R = TypeVar("R")
T = TypeVar("T")


@runtime_checkable
class EitherPort(Protocol[L, R]):
    """Two-variant disjoint container.

    Anything exposing a catamorphism over a left (failure) and a right
    (success) payload qualifies, including ``Settled``.
    """

    def fold(self, on_left: Callable[[L], Any], on_right: Callable[[R], Any]) -> Any: ...


@runtime_checkable
class FuturePort(Protocol):
    """Eager future primitive.

    Satisfied by ``asyncio.Future``, ``asyncio.Task`` and
    ``concurrent.futures.Future``.
    """

    def add_done_callback(self, fn: Callable[[Any], object], /) -> None: ...
    def cancelled(self) -> bool: ...
    def exception(self) -> BaseException | None: ...
    def result(self) -> Any: ...
