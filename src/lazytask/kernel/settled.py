"""Settled outcome of a single Task - the never-fail aggregate entry."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, Literal, Self, TypeVar

from pydantic import BaseModel, ConfigDict

from lazytask.kernel.errors import SettledAccessError

E = TypeVar("E")
R = TypeVar("R")
T = TypeVar("T")


class Settled(BaseModel, Generic[E, R]):
    """Outcome of one Task execution, tagged ``failed`` or ``success``.

    Exactly one payload is meaningful: ``err`` for a failed outcome,
    ``data`` for a successful one. Instances are immutable.

    Attributes:
        status: Which channel the Task settled on.
        err: Failure payload when ``status == "failed"``.
        data: Success payload when ``status == "success"``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: Literal["failed", "success"]
    err: Any = None
    data: Any = None

    @classmethod
    def failed(cls, err: E) -> Self:
        return cls(status="failed", err=err)

    @classmethod
    def success(cls, data: R) -> Self:
        return cls(status="success", data=data)

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def fold(self, on_failed: Callable[[E], T], on_success: Callable[[R], T]) -> T:
        """Apply ``on_failed`` to the error or ``on_success`` to the data."""
        if self.is_failed:
            return on_failed(self.err)
        return on_success(self.data)

    def left(self) -> E:
        """Return the failure payload.

        Raises:
            SettledAccessError: If the outcome is a success.
        """
        if not self.is_failed:
            raise SettledAccessError("Settled outcome is not a failure", self.status)
        return self.err

    def right(self) -> R:
        """Return the success payload.

        Raises:
            SettledAccessError: If the outcome is a failure.
        """
        if not self.is_success:
            raise SettledAccessError("Settled outcome is not a success", self.status)
        return self.data
