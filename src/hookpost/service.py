"""Hookpost service facade.

Wires the store, queue, occurrence bus, listener registry, dispatcher and
worker together for single-process use.

Example:
    ```python
    from hookpost.service import WebhookService

    async with WebhookService.create() as hooks:
        hooks.store.add({
            "id": "7",
            "delivery_url": "https://example.com/hooks",
            "secret": "s3cret",
            "topics": ["order_created"],
            "status": "published",
        })
        hooks.bootstrap()

        hooks.publish("order.created", order)   # enqueues, no network I/O
        attempts = await hooks.drain()          # delivers
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from hookpost.config import Settings
from hookpost.events import OccurrenceBus
from hookpost.listeners import ListenerRegistry
from hookpost.logging import get_logger
from hookpost.models import DeliveryAttempt
from hookpost.queue import DeliveryQueue, InMemoryDeliveryQueue
from hookpost.registry import WebhookRegistryReader
from hookpost.storage import InMemoryWebhookStore, WebhookStore
from hookpost.webhooks import WebhookDispatcher
from hookpost.worker import DeliveryWorker

logger = get_logger(__name__)


@dataclass
class WebhookService:
    """High-level entry point for publishing occurrences and delivering webhooks.

    Attributes:
        settings: Configuration settings.
        store: Webhook subscription store.
        queue: Delivery queue jobs are enqueued on.
        bus: Occurrence bus domain code publishes to.
        registry: Listener registry bound to the bus.
        dispatcher: HTTP dispatcher for delivery jobs.
        worker: In-process worker, only when ``queue`` is in-memory.
    """

    settings: Settings
    store: WebhookStore
    queue: DeliveryQueue
    bus: OccurrenceBus
    registry: ListenerRegistry
    dispatcher: WebhookDispatcher
    worker: DeliveryWorker | None = None

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        store: WebhookStore | None = None,
        queue: DeliveryQueue | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> WebhookService:
        """Create a WebhookService with default dependencies.

        Args:
            settings: Optional settings. Uses defaults if None.
            store: Webhook store. Defaults to an empty in-memory store.
            queue: Delivery queue. Defaults to an in-memory queue.
            client: HTTP client for the dispatcher.

        Returns:
            Configured WebhookService instance (not yet bootstrapped).
        """
        if settings is None:
            settings = Settings()
        if store is None:
            store = InMemoryWebhookStore()
        if queue is None:
            queue = InMemoryDeliveryQueue()

        bus = OccurrenceBus()
        registry = ListenerRegistry(WebhookRegistryReader(store), queue, bus, settings)
        dispatcher = WebhookDispatcher(store, settings, client=client)
        worker = (
            DeliveryWorker(queue, dispatcher) if isinstance(queue, InMemoryDeliveryQueue) else None
        )

        return cls(
            settings=settings,
            store=store,
            queue=queue,
            bus=bus,
            registry=registry,
            dispatcher=dispatcher,
            worker=worker,
        )

    async def __aenter__(self) -> WebhookService:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.dispatcher.aclose()

    def bootstrap(self) -> int:
        """Bind listeners for the published webhooks. Idempotent."""
        return self.registry.bootstrap()

    def rebootstrap(self) -> int:
        return self.registry.rebootstrap()

    def publish(self, topic: str, entity: Any) -> int:
        """Announce that an entity was created, updated or restored."""
        return self.bus.publish(topic, entity)

    def publish_deleted(
        self, topic: str, entity_id: Any, snapshot: Any | None = None
    ) -> int:
        """Announce a deletion with the last-known snapshot of the entity."""
        return self.bus.publish_deleted(topic, entity_id, snapshot)

    async def drain(self) -> list[DeliveryAttempt]:
        """Deliver every queued job in this process.

        Raises:
            RuntimeError: If the queue is external and has no in-process worker.
        """
        if self.worker is None:
            raise RuntimeError("drain() needs an InMemoryDeliveryQueue; run an external worker")
        return await self.worker.drain()


__all__ = ["WebhookService"]
