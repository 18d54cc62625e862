#!/usr/bin/env python3
"""Run three flaky timed effects in parallel and report every outcome.

Swap ``Task.all_settled`` for ``Task.all_settled_seq`` to run them one
after another.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from lazytask import Task

logging.basicConfig(level=logging.INFO, format="%(relativeCreated)6.0fms %(message)s")
logger = logging.getLogger("settle_all")


def flaky_after(seconds: float, value: Any) -> Task[Exception, Any]:
    def computation(reject, resolve) -> None:
        def finish() -> None:
            logger.info("settling %r", value)
            if random.random() > 0.5:
                resolve(value)
            else:
                reject(RuntimeError(f"bad error on: {value}"))

        asyncio.get_running_loop().call_later(seconds, finish)

    return Task(computation)


async def main() -> None:
    results = await Task.all_settled(
        [flaky_after(1.0, 2), flaky_after(0.5, "a"), flaky_after(0.7, True)]
    )
    for result in results:
        result.fold(
            lambda err: logger.error("failed: %s", err),
            lambda data: logger.info("succeeded: %r", data),
        )


if __name__ == "__main__":
    asyncio.run(main())
