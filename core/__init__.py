# core/__init__.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Core module public API for the build scheduler

"""Core components for assigning build items to labelled nodes.

The node pool tracks workers, their label atoms and whether they are busy.
The build queue holds pending items and, on every trigger, matches them
against idle nodes using their label expressions, honoring blocking policies
and the one-item-per-node rule.

Primary Components:
    NodePool: Registered nodes and the shared scheduling lock
    BuildQueue: Pending items and the match-and-assign algorithm
    ThreadPoolDispatcher: Execution collaborator running assigned work
    BlockWhileItemBuilding, BlockWhileUpstreamBuilding, BlockWhileRunBuilding:
        Blocking policies for upstream dependencies
    check_label: Configuration-time validation of label text

Example:
    >>> from core import NodePool, BuildQueue
    >>> pool = NodePool()
    >>> queue = BuildQueue(pool)
    >>> node = pool.register_node("w32", "win 32bit")
    >>> handle = queue.submit("win && 32bit", task="p1")
    >>> handle.node
    'w32'
"""

from .blocking import (
    BlockingPolicy,
    BlockWhileItemBuilding,
    BlockWhileRunBuilding,
    BlockWhileUpstreamBuilding,
)
from .build_queue import BuildQueue
from .dispatch import ThreadPoolDispatcher
from .exceptions import (
    DuplicateNodeError,
    NodeBusyError,
    SchedulerError,
    UnknownItemError,
    UnknownNodeError,
)
from .pool import NodePool
from .validation import CheckKind, LabelCheck, check_label

__all__ = [
    "BlockingPolicy",
    "BlockWhileItemBuilding",
    "BlockWhileRunBuilding",
    "BlockWhileUpstreamBuilding",
    "BuildQueue",
    "CheckKind",
    "DuplicateNodeError",
    "LabelCheck",
    "NodeBusyError",
    "NodePool",
    "SchedulerError",
    "ThreadPoolDispatcher",
    "UnknownItemError",
    "UnknownNodeError",
    "check_label",
]

__version__ = "1.0.0"
__description__ = "Core components for label-driven build scheduling"
