"""Task - a lazy, rejectable, re-runnable asynchronous computation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Generator, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from lazytask.kernel.errors import TaskRejected
from lazytask.kernel.guard import SettlementGuard
from lazytask.kernel.ports import EitherPort, FuturePort
from lazytask.kernel.settled import Settled
from lazytask.kernel.trace import Trace

logger = logging.getLogger(__name__)

E = TypeVar("E")
F = TypeVar("F")
R = TypeVar("R")
O = TypeVar("O")
Y = TypeVar("Y")
T = TypeVar("T")

Reject = Callable[[Any], None]
Resolve = Callable[[Any], None]
Computation = Callable[[Reject, Resolve], None]

Effect = Union[FuturePort, Awaitable[Any]]


def _as_future(effect: Effect) -> FuturePort:
    if isinstance(effect, FuturePort):
        return effect
    return asyncio.ensure_future(effect)


def _observe(future: FuturePort, reject: Reject, resolve: Resolve) -> None:
    """Wire a future's completion to the two channels."""

    def on_done(done: FuturePort) -> None:
        if done.cancelled():
            logger.debug("Wrapped future was cancelled, rejecting")
            reject(asyncio.CancelledError())
            return
        exc = done.exception()
        if exc is not None:
            reject(exc)
        else:
            resolve(done.result())

    future.add_done_callback(on_done)


@dataclass(frozen=True)
class Task(Generic[E, R]):
    """Deferred computation over a failure channel ``E`` and a success channel ``R``.

    A Task wraps a computation of shape ``(reject, resolve) -> None``. Nothing
    runs until ``fork`` is called, and every fork runs the computation again:
    outcomes are never cached. Exactly one channel is expected to be invoked,
    at most once, per fork.

    Task is a Functor (``map``), a Monad (``of``/``chain``) and an Applicative
    (``ap``/``ap_to``). Combinators never mutate their inputs; they return new
    Tasks whose computation forks the inputs.
    """

    computation: Computation

    def fork(self, reject: Callable[[E], None], resolve: Callable[[R], None]) -> None:
        """Run the computation, reporting through ``reject`` or ``resolve``."""
        self.computation(reject, resolve)

    # Constructors

    @staticmethod
    def of(value: R) -> Task[Any, R]:
        """Create a Task that resolves synchronously with ``value``."""

        def computation(_: Reject, resolve: Resolve) -> None:
            resolve(value)

        return Task(computation)

    @staticmethod
    def rejected(err: E) -> Task[E, Any]:
        """Create a Task that rejects synchronously with ``err``."""

        def computation(reject: Reject, _: Resolve) -> None:
            reject(err)

        return Task(computation)

    @staticmethod
    def from_future(effect: Effect) -> Task[BaseException, Any]:
        """Adapt an eager future into a Task.

        The future is already running (coroutines are scheduled here, which
        needs a running event loop), so the effect starts before the Task is
        forked and every fork observes the same outcome. Use
        ``from_lazy_future`` to keep the effect lazy.
        """
        future = _as_future(effect)

        def computation(reject: Reject, resolve: Resolve) -> None:
            _observe(future, reject, resolve)

        return Task(computation)

    @staticmethod
    def from_lazy_future(factory: Callable[[], Effect]) -> Task[BaseException, Any]:
        """Adapt a future factory into a Task; ``factory`` runs on every fork."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            _observe(_as_future(factory()), reject, resolve)

        return Task(computation)

    @staticmethod
    def from_either(container: EitherPort[E, R]) -> Task[E, R]:
        """Create a Task that settles synchronously from a left/right container."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            container.fold(reject, resolve)

        return Task(computation)

    @staticmethod
    def from_try(fn: Callable[[], R]) -> Task[Exception, R]:
        """Create a Task that calls ``fn`` on fork, rejecting with anything it raises."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            try:
                value = fn()
            except Exception as exc:
                reject(exc)
                return
            resolve(value)

        return Task(computation)

    # Array traversal, see lazytask.combinators.traverse

    @staticmethod
    def all(tasks: Iterable[Task[E, R]]) -> Task[E, list[R]]:
        """Fork every Task concurrently; fail on the first failure to settle."""
        from lazytask.combinators.traverse import all_tasks

        return all_tasks(tasks)

    @staticmethod
    def all_seq(tasks: Iterable[Task[E, R]]) -> Task[E, list[R]]:
        """Fork Tasks one at a time, in order; fail on the first failure."""
        from lazytask.combinators.traverse import all_seq

        return all_seq(tasks)

    @staticmethod
    def all_settled(tasks: Iterable[Task[E, R]]) -> Task[Any, list[Settled[E, R]]]:
        """Fork every Task concurrently and collect every outcome; never fails."""
        from lazytask.combinators.traverse import all_settled

        return all_settled(tasks)

    @staticmethod
    def all_settled_seq(tasks: Iterable[Task[E, R]]) -> Task[Any, list[Settled[E, R]]]:
        """Fork Tasks one at a time and collect every outcome; never fails."""
        from lazytask.combinators.traverse import all_settled_seq

        return all_settled_seq(tasks)

    @staticmethod
    def array_traverse_a(f: Callable[[T], Task[E, R]], items: Iterable[T]) -> Task[E, list[R]]:
        from lazytask.combinators.traverse import traverse_a

        return traverse_a(f, items)

    @staticmethod
    def array_traverse_m(f: Callable[[T], Task[E, R]], items: Iterable[T]) -> Task[E, list[R]]:
        from lazytask.combinators.traverse import traverse_m

        return traverse_m(f, items)

    # Functor / Monad

    def map(self, f: Callable[[R], O]) -> Task[E, O]:
        """Transform the success value with ``f``; failures pass through."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            self.fork(reject, lambda value: resolve(f(value)))

        return Task(computation)

    def reject_map(self, g: Callable[[E], F]) -> Task[F, R]:
        """Transform the failure with ``g``; successes pass through."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            self.fork(lambda err: reject(g(err)), resolve)

        return Task(computation)

    error_map = reject_map

    def chain(self, f: Callable[[R], Task[E, O]]) -> Task[E, O]:
        """Sequence a Task built from the success value.

        ``f`` is only invoked once this Task resolves, and the Task it
        returns is forked straight away.
        """

        def computation(reject: Reject, resolve: Resolve) -> None:
            self.fork(reject, lambda value: f(value).fork(reject, resolve))

        return Task(computation)

    bind = chain
    flat_map = chain

    def or_else(self, g: Callable[[E], Task[F, R]]) -> Task[F, R]:
        """Recover from a failure with the Task returned by ``g``."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            self.fork(lambda err: g(err).fork(reject, resolve), resolve)

        return Task(computation)

    def bimap(self, g: Callable[[E], F], f: Callable[[R], O]) -> Task[F, O]:
        """Map the failure with ``g`` or the success with ``f``."""

        def computation(reject: Reject, resolve: Resolve) -> None:
            self.fork(lambda err: reject(g(err)), lambda value: resolve(f(value)))

        return Task(computation)

    def fold(self, g: Callable[[E], T], f: Callable[[R], T]) -> Task[Any, T]:
        """Catamorphism: always resolve, with ``g(err)`` or ``f(value)``."""

        def computation(_: Reject, resolve: Resolve) -> None:
            self.fork(lambda err: resolve(g(err)), lambda value: resolve(f(value)))

        return Task(computation)

    cata = fold

    # Applicative

    def ap(self, task_of_function: Task[E, Callable[[R], Y]]) -> Task[E, Y]:
        """Apply the function held by ``task_of_function`` to this Task's value.

        Both Tasks are forked before either is known to settle. The result
        resolves once both sides have resolved, and rejects with the first
        failure to arrive; anything settling afterwards is discarded.
        """

        def computation(reject: Reject, resolve: Resolve) -> None:
            guard = SettlementGuard(reject, resolve)
            self.fork(guard.fail, guard.accept_value)
            task_of_function.fork(guard.fail, guard.accept_function)

        return Task(computation)

    def ap_to(self, other: Task[E, Any]) -> Task[E, Any]:
        """Apply the function held by this Task to the value of ``other``.

        Mirror of ``ap``: ``self`` holds the function, ``other`` the value.
        """

        def computation(reject: Reject, resolve: Resolve) -> None:
            guard = SettlementGuard(reject, resolve)
            self.fork(guard.fail, guard.accept_function)
            other.fork(guard.fail, guard.accept_value)

        return Task(computation)

    # Adapters

    @staticmethod
    def tap(f: Callable[[R], Task[E, Any] | None]) -> Callable[[R], Task[E, R]]:
        """Build a ``chain`` step that runs ``f`` for its effect only.

        The original value is re-reported once the Task returned by ``f``
        resolves; a failure of that Task propagates.
        """

        def step(value: R) -> Task[E, R]:
            effect = f(value)
            if effect is None:
                return Task.of(value)
            return effect.map(lambda _: value)

        return step

    @staticmethod
    def reject_tap(f: Callable[[E], Task[Any, Any] | None]) -> Callable[[E], Task[E, Any]]:
        """Build an ``or_else`` step that runs ``f`` on the failure for its effect only.

        Whatever the Task returned by ``f`` settles with, the original error
        is re-reported on the failure channel.
        """

        def step(err: E) -> Task[E, Any]:
            effect = f(err)
            if effect is None:
                return Task.rejected(err)
            return effect.fold(lambda _: err, lambda _: err).chain(Task.rejected)

        return step

    def traced(self, trace: Trace, label: str) -> Task[E, R]:
        from lazytask.combinators.ops import traced

        return traced(self, trace, label)

    def to_future(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[R]:
        """Fork once, now, and expose the outcome as an ``asyncio.Future``.

        Failures that are not exceptions, and ``StopIteration``, are wrapped
        in ``TaskRejected``.
        Outcomes reported from another thread are handed to ``loop`` with
        ``call_soon_threadsafe``.
        """
        loop = loop or asyncio.get_running_loop()
        future: asyncio.Future[R] = loop.create_future()

        def settle(apply: Callable[[], None]) -> None:
            if future.done():
                logger.debug("Dropping outcome, future already done")
                return
            apply()

        def dispatch(apply: Callable[[], None]) -> None:
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                settle(apply)
            else:
                logger.debug("Marshalling outcome onto the owning event loop")
                loop.call_soon_threadsafe(settle, apply)

        def reject(err: Any) -> None:
            # Futures refuse StopIteration, so it travels as a reason like non-exceptions.
            if isinstance(err, BaseException) and not isinstance(err, StopIteration):
                exc = err
            else:
                exc = TaskRejected(err)
            dispatch(lambda: future.set_exception(exc))

        def resolve(value: R) -> None:
            dispatch(lambda: future.set_result(value))

        self.fork(reject, resolve)
        return future

    def __await__(self) -> Generator[Any, None, R]:
        return self.to_future().__await__()
