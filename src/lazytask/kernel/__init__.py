"""Kernel layer - the Task type and its supporting primitives."""

from lazytask.kernel.errors import SettledAccessError, TaskRejected
from lazytask.kernel.guard import GatherGuard, SettlementGuard
from lazytask.kernel.ports import EitherPort, FuturePort
from lazytask.kernel.settled import Settled
from lazytask.kernel.task import Task
from lazytask.kernel.trace import Evidence, Trace

__all__ = [
    "Task",
    "Settled",
    # Errors
    "TaskRejected",
    "SettledAccessError",
    # Guards
    "SettlementGuard",
    "GatherGuard",
    # Ports
    "EitherPort",
    "FuturePort",
    # Tracing
    "Evidence",
    "Trace",
]
