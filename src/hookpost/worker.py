"""Queue worker for delivery jobs.

Real deployments register ``DeliveryWorker.run_task`` (or
``handle_delivery_args``) with their task runner under
``DELIVERY_TASK_NAME``. With ``InMemoryDeliveryQueue``, ``drain`` runs
every pending task in order.
"""

from __future__ import annotations

from typing import Any

import pydantic

from hookpost.exceptions import ValidationError
from hookpost.logging import get_logger
from hookpost.models import DeliveryAttempt, DeliveryJob
from hookpost.queue import DELIVERY_TASK_NAME, InMemoryDeliveryQueue, QueuedTask
from hookpost.webhooks import WebhookDispatcher

logger = get_logger(__name__)


class DeliveryWorker:
    """Runs queued delivery tasks through the dispatcher."""

    def __init__(self, queue: InMemoryDeliveryQueue, dispatcher: WebhookDispatcher) -> None:
        self._queue = queue
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> WebhookDispatcher:
        return self._dispatcher

    async def handle_delivery_args(self, args: dict[str, Any]) -> DeliveryAttempt:
        """Validate raw task args and dispatch the job.

        Raises:
            ValidationError: If the args do not describe a delivery job.
        """
        try:
            job = DeliveryJob.model_validate(args)
        except pydantic.ValidationError as e:
            raise ValidationError("args", f"invalid delivery job: {e.error_count()} error(s)") from e
        return await self._dispatcher.dispatch(job)

    async def run_task(self, task: QueuedTask) -> DeliveryAttempt:
        """Run one queued task.

        Raises:
            ValidationError: If the task is not a delivery task or its
                args are invalid.
        """
        if task.task_name != DELIVERY_TASK_NAME:
            raise ValidationError("task_name", f"unknown task {task.task_name!r}")
        return await self.handle_delivery_args(task.args)

    async def drain(self) -> list[DeliveryAttempt]:
        """Run every pending task, oldest first.

        Invalid tasks are logged and dropped; one bad task does not stop
        the rest.

        Returns:
            Attempts in the order their tasks ran.
        """
        attempts: list[DeliveryAttempt] = []
        while (task := self._queue.pop()) is not None:
            try:
                attempts.append(await self.run_task(task))
            except ValidationError as e:
                logger.error("Dropping invalid task", task_id=task.id, **e.to_dict()["error"])
        if attempts:
            logger.debug("Drained delivery queue", attempts=len(attempts))
        return attempts


__all__ = ["DeliveryWorker"]
