"""Combinator primitives that observe Tasks without changing their outcome."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

from lazytask.kernel.task import Reject, Resolve, Task
from lazytask.kernel.trace import Trace

E = TypeVar("E")
R = TypeVar("R")


def traced(task: Task[E, R], trace: Trace, label: str) -> Task[E, R]:
    """Record every fork and settlement of ``task`` in ``trace``.

    Semantics:
        - Each fork records ``"<label>.fork"``
        - Settlement records ``"<label>.settle"`` as a child of the fork
          event, with the channel and the elapsed time
        - The outcome is forwarded unchanged

    Args:
        task: The Task to observe.
        trace: Trace receiving the events; a disabled trace records nothing.
        label: Prefix for the recorded actions.

    Returns:
        Task[E, R]: A Task with the same outcome as ``task``.
    """

    def computation(reject: Reject, resolve: Resolve) -> None:
        fork_id = trace.record(f"{label}.fork")
        start_time = time.perf_counter()

        def settling(channel: str, report: Callable[[Any], None]) -> Callable[[Any], None]:
            def on_settle(payload: Any) -> None:
                trace.record(
                    f"{label}.settle",
                    info={"channel": channel},
                    parent_id=fork_id,
                    duration_ms=(time.perf_counter() - start_time) * 1000,
                )
                report(payload)

            return on_settle

        task.fork(settling("failure", reject), settling("success", resolve))

    return Task(computation)
