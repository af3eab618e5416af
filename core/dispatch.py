# core/dispatch.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Thread-pool execution collaborator for assigned build items

"""Run assigned items on a thread pool and report completion to the queue.

The dispatcher subscribes to a ``BuildQueue`` as an assignment listener. For
every assignment it submits the work callable to a ``ThreadPoolExecutor``;
the worker thread marks the item running, executes the work and finally
reports completion, which frees the node and triggers the next match pass.
"""

from __future__ import annotations
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional

from model.item import Assignment, ItemHandle
from .build_queue import BuildQueue
from utils.logger import get_logger

Work = Callable[[Assignment], None]


class ThreadPoolDispatcher:
    """Executes assigned items asynchronously, outside the queue lock.

    Example:
        >>> with ThreadPoolDispatcher(queue, work=run_build) as dispatcher:
        ...     queue.submit("linux")
        ...     dispatcher.wait_idle(timeout=10)
    """

    def __init__(
        self, queue: BuildQueue, work: Work, max_workers: Optional[int] = None
    ):
        self.queue = queue
        self._work = work
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="ergon-executor"
        )
        self._futures: List[Future] = []
        self._lock = threading.Lock()
        queue.add_assignment_listener(self._on_assigned)

    def _on_assigned(self, assignment: Assignment, handle: ItemHandle) -> None:
        future = self._executor.submit(self._run, assignment, handle)
        future.add_done_callback(self._log_failure)
        with self._lock:
            self._futures.append(future)

    def _run(self, assignment: Assignment, handle: ItemHandle) -> Assignment:
        try:
            self.queue.on_started(handle)
            self._work(assignment)
        finally:
            self.queue.on_completed(handle)
        return assignment

    @staticmethod
    def _log_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            get_logger().error(f"Build execution failed: {type(exc).__name__}: {exc}")

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait until every dispatched item, including follow-ups, has finished.

        Completions can trigger new assignments, so this keeps waiting until
        no outstanding work remains.

        Returns:
            True if all work finished, False on timeout
        """
        while True:
            with self._lock:
                outstanding = [f for f in self._futures if not f.done()]
            if not outstanding:
                return True
            _, not_done = wait(outstanding, timeout=timeout)
            if not_done:
                return False

    def shutdown(self, wait_for_work: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_work)

    def __enter__(self) -> ThreadPoolDispatcher:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
