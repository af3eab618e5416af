# model/item.py

"""
Item
====

A unit of pending work with an optional label expression. Items are
immutable; their lifecycle lives on the ``ItemHandle`` returned to the
submitter:

    PENDING -> ASSIGNED -> RUNNING -> COMPLETED
    PENDING -> CANCELLED

``RUNNING`` and ``COMPLETED`` are reported by the execution collaborator,
the queue itself only moves items out of ``PENDING``.
"""

from __future__ import annotations
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from labels.expression import LabelExpression
from .run_reference import RunReference

if TYPE_CHECKING:
    from core.blocking import BlockingPolicy


class ItemState(Enum):
    PENDING = auto()
    ASSIGNED = auto()
    RUNNING = auto()
    COMPLETED = auto()
    CANCELLED = auto()

    @property
    def is_building(self) -> bool:
        return self in (ItemState.ASSIGNED, ItemState.RUNNING)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Item:
    item_id: int
    task: str
    expression: Optional[LabelExpression] = None
    blockers: Tuple["BlockingPolicy", ...] = ()

    @property
    def label_name(self) -> Optional[str]:
        """Rendered label expression, None when any node will do."""
        return self.expression.name if self.expression is not None else None

    def __str__(self) -> str:
        return f"#{self.item_id}:{self.task}"


@dataclass(frozen=True, slots=True)
class Assignment:
    """Result of a successful match: which node runs which item."""

    item: Item
    node: str
    run: RunReference

    def __str__(self) -> str:
        return f"{self.run} on {self.node}"


class ItemHandle:
    """Submitter's view of a queued item.

    The handle resolves to an ``Assignment`` once the item is placed on a
    node. State fields are written by the queue while it holds its lock;
    everything here only reads them.
    """

    def __init__(self, item: Item, canceller: Callable[[ItemHandle], bool]):
        self.item = item
        self._canceller = canceller
        self._future: Future = Future()
        self._state = ItemState.PENDING
        self._assignment: Optional[Assignment] = None

    @property
    def item_id(self) -> int:
        return self.item.item_id

    @property
    def task(self) -> str:
        return self.item.task

    @property
    def state(self) -> ItemState:
        return self._state

    @property
    def assignment(self) -> Optional[Assignment]:
        return self._assignment

    @property
    def node(self) -> Optional[str]:
        return self._assignment.node if self._assignment is not None else None

    @property
    def run(self) -> Optional[RunReference]:
        return self._assignment.run if self._assignment is not None else None

    def cancel(self) -> bool:
        """Withdraw the item if it is still pending.

        Returns:
            True if the item was removed from the queue, False if it had
            already been assigned (or was cancelled before).
        """
        return self._canceller(self)

    def cancelled(self) -> bool:
        return self._state is ItemState.CANCELLED

    def done(self) -> bool:
        """True once the item has been assigned or cancelled."""
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> Assignment:
        """Wait for the assignment.

        Raises:
            concurrent.futures.CancelledError: if the item was cancelled
            concurrent.futures.TimeoutError: if no node took it in time
        """
        return self._future.result(timeout)

    def add_done_callback(self, fn: Callable[[ItemHandle], None]) -> None:
        self._future.add_done_callback(lambda _f: fn(self))

    def __repr__(self) -> str:
        return f"ItemHandle({self.item}, state={self._state}, node={self.node})"
