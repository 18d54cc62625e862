"""Combinators - traversal, aggregation and observation of Tasks."""

from lazytask.combinators.laws import equivalent, outcome_of
from lazytask.combinators.ops import traced
from lazytask.combinators.traverse import (
    all_seq,
    all_settled,
    all_settled_seq,
    all_tasks,
    pair,
    settle,
    traverse_a,
    traverse_m,
    triple,
)

__all__ = [
    # Fail-fast
    "all_tasks",
    "all_seq",
    "traverse_a",
    "traverse_m",
    "pair",
    "triple",
    # Never-fail
    "settle",
    "all_settled",
    "all_settled_seq",
    # Observation
    "traced",
    "outcome_of",
    "equivalent",
]
