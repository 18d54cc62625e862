"""Error types for Task settlement and outcome inspection."""

from __future__ import annotations


class TaskRejected(Exception):
    """Error raised when a Task rejects with a reason that is not an exception.

    Futures can only fail with exceptions, so ``Task.to_future`` wraps any
    other failure payload in this error. The original payload is preserved
    verbatim in ``reason``.
    """

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Task rejected with {reason!r}")

    def __repr__(self) -> str:
        return f"TaskRejected(reason={self.reason!r})"


class SettledAccessError(Exception):
    """Error raised when reading the payload of the wrong Settled variant."""

    def __init__(self, message: str, status: str) -> None:
        self.status = status
        super().__init__(message)

    def __repr__(self) -> str:
        return f"SettledAccessError({super().__repr__()}, status={self.status!r})"
