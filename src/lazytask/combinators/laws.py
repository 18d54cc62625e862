"""Task laws and the observational equality used to check them."""

# Task satisfies the following algebraic laws, where ``a ≡ b`` means both
# Tasks settle on the same channel with equal payloads when forked:
#
# 1. Functor identity: t.map(lambda x: x) ≡ t
#
# 2. Functor composition: t.map(f).map(g) ≡ t.map(lambda x: g(f(x)))
#
# 3. Monad left identity: Task.of(x).chain(f) ≡ f(x)
#
# 4. Monad right identity: m.chain(Task.of) ≡ m
#
# 5. Monad associativity: m.chain(f).chain(g) ≡ m.chain(lambda x: f(x).chain(g))
#
# 6. Applicative identity: t.ap(Task.of(lambda x: x)) ≡ t
#
# 7. Applicative homomorphism: Task.of(x).ap(Task.of(f)) ≡ Task.of(f(x))
#
# Laws are observational: a Task is re-run on every fork, so two Tasks are
# only comparable through the outcomes of their executions.

from __future__ import annotations

from typing import Any, TypeVar

from lazytask.combinators.traverse import settle
from lazytask.kernel.settled import Settled
from lazytask.kernel.task import Task

E = TypeVar("E")
R = TypeVar("R")


def outcome_of(task: Task[E, R]) -> Settled[E, R]:
    """Fork ``task`` once and return its outcome.

    Raises:
        ValueError: If the Task does not settle synchronously.
    """
    outcomes: list[Settled[E, R]] = []
    settle(task).fork(_never, outcomes.append)
    if not outcomes:
        raise ValueError("Task did not settle synchronously")
    return outcomes[0]


def equivalent(left: Task[Any, Any], right: Task[Any, Any]) -> bool:
    """Check that two synchronously settling Tasks produce the same outcome."""
    return outcome_of(left) == outcome_of(right)


def _never(err: Any) -> None:
    raise AssertionError(f"settled Task rejected with {err!r}")
