# core/blocking.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Blocking policies that keep an item pending while upstream work is building

"""Blocking policies for queued items.

A blocking policy is an extra eligibility predicate checked before label
matching. A blocked item is skipped for the current match pass but stays
pending and is reconsidered on the next trigger, typically when the
upstream work completes and frees its node.

Policies receive a read-only ``QueueView`` of the queue state so that they
can be evaluated inside the queue's critical section without re-entering it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol

from model.item import ItemHandle
from model.run_reference import RunReference


class QueueView(Protocol):
    """What a blocking policy may ask about the queue."""

    def is_task_building(self, task: str) -> bool: ...

    def is_task_queued(self, task: str, exclude_item: Optional[int] = None) -> bool: ...

    def is_run_building(self, run: RunReference) -> bool: ...


class BlockingPolicy(Protocol):
    def blocked_reason(self, handle: ItemHandle, queue: QueueView) -> Optional[str]:
        """Return why the item is blocked, or None when it may run."""
        ...


@dataclass(frozen=True)
class BlockWhileItemBuilding:
    """Blocks while a designated predecessor item is assigned or running."""

    upstream: ItemHandle

    def blocked_reason(self, handle: ItemHandle, queue: QueueView) -> Optional[str]:
        if self.upstream.state.is_building:
            return f"upstream item {self.upstream.item} is building"
        return None


@dataclass(frozen=True)
class BlockWhileUpstreamBuilding:
    """Blocks while any run of an upstream task is building.

    With ``include_queued`` the item also waits for upstream items that are
    still pending, so downstream work never overtakes its upstream in the
    queue.
    """

    task: str
    include_queued: bool = False

    def blocked_reason(self, handle: ItemHandle, queue: QueueView) -> Optional[str]:
        if queue.is_task_building(self.task):
            return f"upstream task '{self.task}' is building"
        if self.include_queued and queue.is_task_queued(
            self.task, exclude_item=handle.item_id
        ):
            return f"upstream task '{self.task}' is in the queue"
        return None


@dataclass(frozen=True)
class BlockWhileRunBuilding:
    """Blocks while a specific run, referenced as ``job#number``, is building."""

    run: RunReference

    @classmethod
    def from_run_id(cls, run_id: str) -> BlockWhileRunBuilding:
        return cls(RunReference.from_externalizable_id(run_id))

    def blocked_reason(self, handle: ItemHandle, queue: QueueView) -> Optional[str]:
        if queue.is_run_building(self.run):
            return f"run {self.run} is building"
        return None
