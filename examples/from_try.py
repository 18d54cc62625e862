#!/usr/bin/env python3
"""Capture a raising function in a Task; each fork calls it again."""

from __future__ import annotations

import random

from lazytask import Task


def lucky_number() -> int:
    if random.randint(0, 9) > 5:
        return 99
    raise ValueError("bad error")


if __name__ == "__main__":
    task = Task.from_try(lucky_number)
    for _ in range(3):
        task.fork(
            lambda err: print(f"ERR: {err}"),
            lambda final: print(f"SUCC: {final}"),
        )
