"""Listener/topic binding registry.

Built once at process start. ``bootstrap`` reads the published webhooks,
binds one listener per topic and attaches each subscribed webhook to it.
Occurrences then resolve subscribers from this in-memory snapshot instead
of querying the store per event.

Webhooks published, edited or unpublished after bootstrap take effect on
the next bootstrap (``rebootstrap`` forces one in-process).
"""

from __future__ import annotations

from typing import Any

from hookpost.config import Settings
from hookpost.events import OccurrenceBus
from hookpost.logging import get_logger
from hookpost.models import DeliveryJob, WebhookConfig
from hookpost.queue import DELIVERY_TASK_NAME, DeliveryQueue
from hookpost.registry import WebhookRegistryReader
from hookpost.topics import to_topic

from .base import Listener
from .resources import LISTENERS

logger = get_logger(__name__)


class ListenerRegistry:
    """Binds published webhooks to topic listeners and queues deliveries.

    Example:
        ```python
        registry = ListenerRegistry(reader, queue, bus, settings)
        registry.bootstrap()

        bus.publish("order.created", order)  # one job per subscribed webhook
        ```
    """

    def __init__(
        self,
        reader: WebhookRegistryReader,
        queue: DeliveryQueue,
        bus: OccurrenceBus,
        settings: Settings | None = None,
        listeners: dict[str, type[Listener]] | None = None,
    ) -> None:
        self._reader = reader
        self._queue = queue
        self._bus = bus
        self._settings = settings or Settings()
        self._listener_classes = dict(listeners if listeners is not None else LISTENERS)
        self._listeners: dict[str, Listener] = {}
        self._webhooks: dict[str, WebhookConfig] = {}
        self._bootstrapped = False

    @property
    def bus(self) -> OccurrenceBus:
        return self._bus

    @property
    def bootstrapped(self) -> bool:
        return self._bootstrapped

    @property
    def webhooks(self) -> list[WebhookConfig]:
        """Webhooks loaded at the last bootstrap."""
        return list(self._webhooks.values())

    def bootstrap(self) -> int:
        """Bind listeners for every published webhook.

        Safe to call more than once: later calls do nothing.

        Returns:
            Number of (topic, webhook) bindings created by this call.
        """
        if self._bootstrapped:
            logger.debug("Listener registry already bootstrapped")
            return 0

        bindings = 0
        for webhook in self._reader.list_published():
            self._webhooks[webhook.id] = webhook
            for topic in webhook.topics:
                listener = self._listener_for(topic)
                if listener is None:
                    continue
                if listener.bind(self.deliver, webhook.id):
                    bindings += 1

        self._bootstrapped = True
        logger.info(
            "Webhook listeners bound",
            webhooks=len(self._webhooks),
            listeners=len(self._listeners),
            bindings=bindings,
        )
        return bindings

    def reset(self) -> None:
        """Drop all bindings and unsubscribe from the bus."""
        for listener in self._listeners.values():
            listener.unbind_all()
        self._listeners.clear()
        self._webhooks.clear()
        self._bootstrapped = False

    def rebootstrap(self) -> int:
        """Reload published webhooks and bind them again."""
        self.reset()
        return self.bootstrap()

    def listener(self, topic: str) -> Listener | None:
        return self._listeners.get(to_topic(topic))

    def subscribers(self, topic: str) -> list[str]:
        """IDs of the webhooks bound to a topic."""
        listener = self.listener(topic)
        return listener.webhook_ids if listener is not None else []

    def deliver(self, webhook_id: str, topic: str, payload: dict[str, Any]) -> str:
        """Queue one delivery job. Performs no network I/O.

        Returns:
            Task ID from the queue.
        """
        job = DeliveryJob(webhook_id=webhook_id, topic=topic, payload=payload)
        task_id = self._queue.enqueue(
            DELIVERY_TASK_NAME,
            job.model_dump(mode="json"),
            self._settings.queue_name,
        )
        logger.debug(
            "Queued webhook delivery",
            webhook_id=job.webhook_id,
            topic=job.topic,
            task_id=task_id,
            triggered_at=job.triggered_at,
        )
        return task_id

    def _listener_for(self, topic: str) -> Listener | None:
        topic = to_topic(topic)
        listener = self._listeners.get(topic)
        if listener is not None:
            return listener

        listener_class = self._listener_classes.get(topic)
        if listener_class is None:
            logger.debug("No listener for topic", topic=topic)
            return None

        listener = listener_class(self._bus, meta_prefix=self._settings.meta_prefix)
        self._listeners[topic] = listener
        return listener


# Process-wide registry handle, replaceable in tests
_registry: ListenerRegistry | None = None


def get_listener_registry() -> ListenerRegistry:
    """Get the process-wide listener registry.

    Raises:
        RuntimeError: If no registry has been set.
    """
    if _registry is None:
        raise RuntimeError("Listener registry is not initialised; call set_listener_registry()")
    return _registry


def set_listener_registry(registry: ListenerRegistry) -> None:
    global _registry
    _registry = registry


def reset_listener_registry() -> None:
    """Drop the process-wide registry and its bindings."""
    global _registry
    if _registry is not None:
        _registry.reset()
    _registry = None
