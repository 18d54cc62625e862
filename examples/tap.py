#!/usr/bin/env python3
"""Log an intermediate value without changing what flows through the chain."""

from __future__ import annotations

from lazytask import Task


if __name__ == "__main__":
    task = (
        Task.of(2)
        .chain(lambda n: Task.of(n + 1))
        .chain(Task.tap(lambda n: print(f"After (+1): {n}")))
        .map(lambda n: n * 2)
    )
    task.fork(
        lambda err: print(f"ERR: {err}"),
        lambda final: print(f"SUCC: {final}"),
    )
