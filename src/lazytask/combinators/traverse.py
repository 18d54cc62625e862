"""Array traversal and aggregation over collections of Tasks.

Parallel combinators fork every item before any is known to settle and
report values in index order. When they fail, they fail with the first
failure in *settlement* order, which is nondeterministic for items settling
concurrently; with all items settling synchronously it is the first failure
in index order.

Sequential combinators fork item ``i + 1`` only after item ``i`` resolved
and fail with the first failure in index order.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from lazytask.kernel.guard import GatherGuard
from lazytask.kernel.settled import Settled
from lazytask.kernel.task import Reject, Resolve, Task

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
E = TypeVar("E")
R = TypeVar("R")
T = TypeVar("T")


def settle(task: Task[E, R]) -> Task[Any, Settled[E, R]]:
    """Turn a Task into one that never fails, tagging its outcome."""
    return task.fold(Settled.failed, Settled.success)


def _gather(tasks: Sequence[Task[E, R]]) -> Task[E, list[R]]:
    def computation(reject: Reject, resolve: Resolve) -> None:
        if not tasks:
            resolve([])
            return
        guard = GatherGuard(reject, resolve, size=len(tasks))
        for index, task in enumerate(tasks):
            task.fork(guard.fail, guard.slot(index))

    return Task(computation)


class _Sequencer:
    """Forks Tasks one after another.

    Items that settle synchronously are driven by a loop rather than by
    nested callbacks, so long collections do not grow the stack.
    """

    def __init__(
        self,
        count: int,
        make: Callable[[int], Task[Any, Any]],
        reject: Reject,
        resolve: Resolve,
    ) -> None:
        self.count = count
        self.make = make
        self.reject = reject
        self.resolve = resolve
        self.values: list[Any] = []
        self._looping = False
        self._advanced = False
        self._lock = threading.Lock()

    def run(self) -> None:
        self._looping = True
        while len(self.values) < self.count:
            self._advanced = False
            self.make(len(self.values)).fork(self.reject, self._on_value)
            with self._lock:
                if not self._advanced:
                    # Pending or failed; a later _on_value resumes the loop.
                    self._looping = False
                    return
        self._looping = False
        self.resolve(list(self.values))

    def _on_value(self, value: Any) -> None:
        with self._lock:
            self.values.append(value)
            if self._looping:
                self._advanced = True
                return
        self.run()


def _in_order(count: int, make: Callable[[int], Task[E, R]]) -> Task[E, list[R]]:
    def computation(reject: Reject, resolve: Resolve) -> None:
        _Sequencer(count, make, reject, resolve).run()

    return Task(computation)


def all_tasks(tasks: Iterable[Task[E, R]]) -> Task[E, list[R]]:
    """Fork every Task concurrently; resolve with all values in index order.

    Rejects with the first failure to settle. Later outcomes are discarded,
    but the Tasks that produce them are not stopped.
    """
    return _gather(tuple(tasks))


def all_seq(tasks: Iterable[Task[E, R]]) -> Task[E, list[R]]:
    """Fork Tasks one at a time, in order; reject on the first failure.

    Tasks after a failing one are never forked.
    """
    items = tuple(tasks)
    return _in_order(len(items), items.__getitem__)


def all_settled(tasks: Iterable[Task[E, R]]) -> Task[Any, list[Settled[E, R]]]:
    """Fork every Task concurrently and collect each outcome; never rejects."""
    return _gather(tuple(settle(task) for task in tasks))


def all_settled_seq(tasks: Iterable[Task[E, R]]) -> Task[Any, list[Settled[E, R]]]:
    """Fork Tasks one at a time and collect each outcome; never rejects."""
    items = tuple(settle(task) for task in tasks)
    return _in_order(len(items), items.__getitem__)


def traverse_a(f: Callable[[T], Task[E, R]], items: Iterable[T]) -> Task[E, list[R]]:
    """Map every item to a Task and fork them all concurrently.

    ``f`` is applied on fork, once per item per fork. Same failure
    semantics as ``all_tasks``.
    """
    values = tuple(items)

    def computation(reject: Reject, resolve: Resolve) -> None:
        _gather([f(value) for value in values]).fork(reject, resolve)

    return Task(computation)


def traverse_m(f: Callable[[T], Task[E, R]], items: Iterable[T]) -> Task[E, list[R]]:
    """Map items to Tasks one at a time, forking each after the previous resolved.

    ``f`` is not called for an item until every earlier item has resolved,
    so nothing past the first failure is ever built or forked.
    """
    values = tuple(items)
    return _in_order(len(values), lambda index: f(values[index]))


def pair(first: Task[E, A], second: Task[E, B]) -> Task[E, tuple[A, B]]:
    """Fork two Tasks concurrently and resolve with both values."""
    return first.map(lambda a: lambda b: (a, b)).ap_to(second)


def triple(first: Task[E, A], second: Task[E, B], third: Task[E, C]) -> Task[E, tuple[A, B, C]]:
    """Fork three Tasks concurrently and resolve with all three values."""
    return first.map(lambda a: lambda b: lambda c: (a, b, c)).ap_to(second).ap_to(third)
