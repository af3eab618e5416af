# core/build_queue.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Build queue matching pending items to idle nodes by label expression

"""Build queue and assignment engine.

The queue holds pending items and runs match passes whenever something may
have changed: an item is submitted, a node becomes idle, an item completes
or a pending item is cancelled. A match pass walks the idle nodes in
registration order and gives each one the earliest-submitted pending item
that is not blocked and whose label the node satisfies. Passes repeat until
one makes no assignment.

Concurrency:
    The whole match loop runs under the node pool's re-entrant lock, so two
    concurrent triggers can never assign the same item or fill the same node
    twice. Futures are resolved and assignment listeners notified only after
    the lock has been released; the actual work runs elsewhere and reports
    back through ``on_started`` / ``on_completed``.
"""

from __future__ import annotations
import itertools
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from labels import LabelExpression, satisfies
from labels.expression import LabelAtom
from model.item import Assignment, Item, ItemHandle, ItemState
from model.node import Node
from model.run_reference import RunReference
from .blocking import BlockingPolicy
from .exceptions import UnknownItemError
from .pool import NodePool
from utils.logger import get_logger

AssignmentListener = Callable[[Assignment, ItemHandle], None]
LabelInput = Union[None, str, LabelAtom, LabelExpression]


class BuildQueue:
    """In-memory queue assigning build items to nodes.

    Attributes:
        pool: Node pool whose idle nodes receive work

    Example:
        >>> pool = NodePool()
        >>> queue = BuildQueue(pool)
        >>> node = pool.register_node("w64", "win 64bit")
        >>> queue.submit("win", task="p3").result().node
        'w64'
    """

    def __init__(
        self, pool: NodePool, on_assigned: Optional[AssignmentListener] = None
    ):
        self.pool = pool
        self._pending: List[ItemHandle] = []
        self._building: Dict[int, ItemHandle] = {}
        self._item_ids = itertools.count(1)
        self._build_numbers: Dict[str, int] = {}
        self._listeners: List[AssignmentListener] = []

        if on_assigned is not None:
            self._listeners.append(on_assigned)

        pool.add_listener(self._node_available)

    @property
    def lock(self):
        return self.pool.lock

    def add_assignment_listener(self, listener: AssignmentListener) -> None:
        """Register an execution collaborator told about every assignment."""
        with self.lock:
            self._listeners.append(listener)

    # Submission API
    def submit(
        self,
        label: LabelInput = None,
        task: str = "",
        blockers: Iterable[BlockingPolicy] = (),
    ) -> ItemHandle:
        """Queue a new build item.

        Args:
            label: Label expression, its text, a bare atom, or None for any node
            task: Job name; runs of the same task share build numbering
            blockers: Blocking policies checked before label matching

        Returns:
            Handle resolved with an ``Assignment`` once a node takes the item

        Raises:
            ParseError: If ``label`` is text that does not parse
            ValueError: If the task name contains ``#``
        """
        logger = get_logger()
        expression = self._to_expression(label)

        if "#" in task:
            raise ValueError(f"Task names may not contain '#': {task!r}")

        with self.lock:
            item_id = next(self._item_ids)
            item = Item(item_id, task or f"item-{item_id}", expression, tuple(blockers))
            handle = ItemHandle(item, self.cancel)
            self._pending.append(handle)

        logger.item_submitted(item_id, item.task, item.label_name)
        self.maintain()
        return handle

    def cancel(self, handle: ItemHandle) -> bool:
        """Remove a still-pending item.

        Returns:
            True if the item was withdrawn; False if an assignment already
            won the race, in which case the assignment stands.
        """
        with self.lock:
            cancelled = handle.state is ItemState.PENDING and handle in self._pending
            if cancelled:
                self._pending.remove(handle)
                handle._state = ItemState.CANCELLED

        get_logger().item_cancelled(handle.item_id, cancelled)

        if cancelled:
            handle._future.cancel()
            # Items waiting on this one in the queue may now be free to go.
            self.maintain()
        return cancelled

    # Execution collaborator callbacks
    def on_started(self, handle: ItemHandle) -> None:
        """Record that the execution collaborator started the assigned work.

        Raises:
            UnknownItemError: If the item is not currently assigned here
        """
        with self.lock:
            if self._building.get(handle.item_id) is not handle:
                raise UnknownItemError(f"Item {handle.item} is not assigned")
            handle._state = ItemState.RUNNING

    def on_completed(self, handle: ItemHandle) -> None:
        """Mark assigned work as finished, free its node and re-run matching.

        Raises:
            UnknownItemError: If the item is not currently assigned here
        """
        with self.lock:
            if self._building.get(handle.item_id) is not handle:
                raise UnknownItemError(f"Item {handle.item} is not assigned")
            del self._building[handle.item_id]
            handle._state = ItemState.COMPLETED

            node = self.pool.find(handle.node)
            if node is not None:
                self.pool._release(node, handle.item_id)

        get_logger().item_completed(handle.item_id, handle.node)
        self.maintain()

    # Matching
    def maintain(self) -> List[Assignment]:
        """Run match passes until no further assignment is possible.

        Assignments made before a blocking policy raises are still handed to
        their futures and listeners; the error then propagates.

        Returns:
            Assignments made by this call, in the order they were made
        """
        made: List[Tuple[Assignment, ItemHandle]] = []
        try:
            with self.lock:
                self._match_until_stable(made)
        finally:
            self._dispatch(made)
        return [assignment for assignment, _ in made]

    def _match_until_stable(self, made: List[Tuple[Assignment, ItemHandle]]) -> None:
        for pass_no in itertools.count(1):
            before = len(made)
            self._match_pass(pass_no, made)
            if len(made) == before:
                break

    def _match_pass(
        self, pass_no: int, made: List[Tuple[Assignment, ItemHandle]]
    ) -> None:
        idle = self.pool.idle_nodes()
        get_logger().match_pass(pass_no, len(idle), len(self._pending), len(self._building))

        # Blocked reasons only change when an assignment is made.
        blocked: Dict[int, Optional[str]] = {}
        for node in idle:
            if not self._pending:
                break
            handle = self._select_for(node, blocked)
            if handle is not None:
                made.append((self._assign(handle, node), handle))
                blocked.clear()

    def _select_for(
        self, node: Node, blocked: Dict[int, Optional[str]]
    ) -> Optional[ItemHandle]:
        # _pending is kept in submission order, so the first match is the oldest.
        for handle in self._pending:
            if handle.item_id not in blocked:
                reason = self._blocked_reason(handle)
                blocked[handle.item_id] = reason
                if reason is not None:
                    get_logger().item_blocked(handle.item_id, reason)
            if blocked[handle.item_id] is not None:
                continue
            if satisfies(handle.item.expression, node.atoms):
                return handle
        return None

    def _assign(self, handle: ItemHandle, node: Node) -> Assignment:
        task = handle.task
        number = self._build_numbers.get(task, 0) + 1
        self._build_numbers[task] = number

        assignment = Assignment(handle.item, node.identity, RunReference(task, number))

        self._pending.remove(handle)
        self._building[handle.item_id] = handle
        handle._state = ItemState.ASSIGNED
        handle._assignment = assignment
        self.pool._occupy(node, handle.item_id)
        return assignment

    def _dispatch(self, made: List[Tuple[Assignment, ItemHandle]]) -> None:
        logger = get_logger()

        for assignment, handle in made:
            logger.item_assigned(
                handle.item_id, handle.task, assignment.node, str(assignment.run)
            )
            handle._future.set_result(assignment)

        if not made:
            return

        with self.lock:
            listeners = list(self._listeners)

        # Every listener hears about every assignment, even if one of them fails.
        errors = []
        for assignment, handle in made:
            for listener in listeners:
                try:
                    listener(assignment, handle)
                except Exception as e:
                    logger.error(
                        f"Assignment listener failed for {handle.item} on "
                        f"{assignment.node}: {type(e).__name__}: {e}"
                    )
                    errors.append(e)

        if errors:
            raise errors[0]

    def _blocked_reason(self, handle: ItemHandle) -> Optional[str]:
        for policy in handle.item.blockers:
            reason = policy.blocked_reason(handle, self)
            if reason is not None:
                return reason
        return None

    def _node_available(self, node: Node) -> None:
        self.maintain()

    def _to_expression(self, label: LabelInput) -> Optional[LabelExpression]:
        if label is None:
            return None
        if isinstance(label, str):
            if not label.strip():
                return None
            return self.pool.parse(label)
        return label.as_expression()

    # QueueView for blocking policies; called with the lock held
    def is_task_building(self, task: str) -> bool:
        return any(h.task == task for h in self._building.values())

    def is_task_queued(self, task: str, exclude_item: Optional[int] = None) -> bool:
        return any(
            h.task == task and h.item_id != exclude_item for h in self._pending
        )

    def is_run_building(self, run: RunReference) -> bool:
        return any(h.run == run for h in self._building.values())

    # Introspection
    def pending(self) -> List[ItemHandle]:
        """Pending items in submission order."""
        with self.lock:
            return list(self._pending)

    def building(self) -> List[ItemHandle]:
        """Assigned or running items in assignment order."""
        with self.lock:
            return list(self._building.values())

    def why_pending(self, handle: ItemHandle) -> Optional[str]:
        """Explain why an item is still waiting, None if it is not pending."""
        with self.lock:
            if handle.state is not ItemState.PENDING:
                return None

            reason = self._blocked_reason(handle)
            if reason is not None:
                return f"Blocked: {reason}"

            expression = handle.item.expression
            label = expression.name if expression is not None else "any node"
            if not self.pool.can_satisfy(expression):
                return f"There are no nodes with the label '{label}'"
            if not self.pool.idle_nodes_matching(expression):
                return f"Waiting for next available executor on {label}"
            return "Waiting behind earlier items for a matching node"

    def __len__(self) -> int:
        with self.lock:
            return len(self._pending)
