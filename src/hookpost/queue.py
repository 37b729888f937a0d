"""Delivery queue interface.

The queue is an external collaborator: a durable, asynchronous task
runner with at-least-once execution and no ordering guarantee. Hookpost
only needs ``enqueue``. ``InMemoryDeliveryQueue`` records tasks for tests
and single-process use, where ``DeliveryWorker.drain`` runs them.
"""

from __future__ import annotations

import copy
import threading
from abc import abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from hookpost.models import timestamp

DELIVERY_TASK_NAME = "hookpost.webhooks.async_delivery"


@runtime_checkable
class DeliveryQueue(Protocol):
    """Protocol for task queues that run delivery jobs."""

    @abstractmethod
    def enqueue(self, task_name: str, args: dict[str, Any], queue_name: str) -> str:
        """Record a task for later execution.

        Must not perform network delivery itself.

        Args:
            task_name: Task identifier, e.g. ``DELIVERY_TASK_NAME``.
            args: JSON-safe task arguments.
            queue_name: Queue/group the task belongs to.

        Returns:
            Task ID assigned by the queue.
        """
        ...


@dataclass(frozen=True)
class QueuedTask:
    """A task waiting in the in-memory queue."""

    task_name: str
    args: dict[str, Any]
    queue_name: str
    id: str = field(default_factory=lambda: uuid4().hex)
    enqueued_at: str = field(default_factory=timestamp)


class InMemoryDeliveryQueue:
    """FIFO queue held in process memory.

    Args are deep-copied on enqueue, so the caller mutating its data
    afterwards cannot change a queued job.
    """

    def __init__(self) -> None:
        self._tasks: deque[QueuedTask] = deque()
        self._lock = threading.Lock()

    def enqueue(self, task_name: str, args: dict[str, Any], queue_name: str) -> str:
        task = QueuedTask(task_name=task_name, args=copy.deepcopy(args), queue_name=queue_name)
        with self._lock:
            self._tasks.append(task)
        return task.id

    def pop(self) -> QueuedTask | None:
        """Remove and return the oldest task, or None when empty."""
        with self._lock:
            return self._tasks.popleft() if self._tasks else None

    def pending(self, queue_name: str | None = None) -> list[QueuedTask]:
        """Snapshot of waiting tasks, oldest first."""
        with self._lock:
            return [t for t in self._tasks if queue_name is None or t.queue_name == queue_name]

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)


__all__ = [
    "DELIVERY_TASK_NAME",
    "DeliveryQueue",
    "InMemoryDeliveryQueue",
    "QueuedTask",
]
