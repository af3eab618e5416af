# core/exceptions.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Exceptions raised by the node pool and build queue

"""Scheduler exceptions.

Only misuse of the scheduling API is reported as an error. An item whose
label no node currently satisfies is not an error; it simply stays pending.
"""


class SchedulerError(RuntimeError):
    """Base class for node pool and build queue errors."""

    pass


class UnknownNodeError(SchedulerError, KeyError):
    """Raised when a node identity is not registered with the pool."""

    def __str__(self) -> str:
        return f"Unknown node: {self.args[0]!r}" if self.args else "Unknown node"


class DuplicateNodeError(SchedulerError):
    """Raised when registering a node identity that already exists."""

    pass


class UnknownItemError(SchedulerError):
    """Raised when a handle does not belong to this queue."""

    pass


class NodeBusyError(SchedulerError):
    """Raised when a node holding a queue item is set idle before the item completes."""

    pass
