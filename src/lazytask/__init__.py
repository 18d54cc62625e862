from .combinators import (
    all_seq,
    all_settled,
    all_settled_seq,
    all_tasks,
    pair,
    settle,
    traced,
    traverse_a,
    traverse_m,
    triple,
)
from .kernel import Evidence, Settled, SettledAccessError, Task, TaskRejected, Trace

__all__ = [
    # Core
    "Task",
    "Settled",
    # Errors
    "TaskRejected",
    "SettledAccessError",
    # Traversal
    "all_tasks",
    "all_seq",
    "all_settled",
    "all_settled_seq",
    "traverse_a",
    "traverse_m",
    "pair",
    "triple",
    "settle",
    # Tracing
    "Trace",
    "Evidence",
    "traced",
]
