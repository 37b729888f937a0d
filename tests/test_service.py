"""End-to-end tests for the WebhookService facade."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx
import pytest

from conftest import make_record, mock_client
from hookpost.config import Settings
from hookpost.models import Coupon, Order
from hookpost.queue import InMemoryDeliveryQueue
from hookpost.service import WebhookService
from hookpost.storage import InMemoryWebhookStore


class TestWebhookService:
    """Tests for WebhookService."""

    def test_create_defaults(self, settings: Settings):
        service = WebhookService.create(settings)
        assert isinstance(service.store, InMemoryWebhookStore)
        assert isinstance(service.queue, InMemoryDeliveryQueue)
        assert service.worker is not None
        assert service.bootstrap() == 0

    @pytest.mark.asyncio
    async def test_order_created_end_to_end(self, settings: Settings, sample_order: Order):
        """Webhook 7 on order.created receives one signed POST for a new order."""
        sent: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return httpx.Response(200)

        async with WebhookService.create(settings, client=mock_client(handler)) as hooks:
            hooks.store.add(make_record(7, secret="s3cr3t"))
            hooks.bootstrap()

            hooks.publish("order.created", sample_order)
            assert sent == []  # enqueue only

            attempts = await hooks.drain()

        assert len(attempts) == 1
        assert len(sent) == 1
        assert sent[0].headers["X-Webhook-Topic"] == "order.created"
        body = json.loads(sent[0].content)
        assert body["id"] == 1001
        assert body["status"] == "processing"
        assert body["total_amount"] == "52.50"
        assert body["subtotal_amount"] == "40.00"

    @pytest.mark.asyncio
    async def test_dns_failure_does_not_reach_domain(
        self, settings: Settings, sample_order: Order
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

        async with WebhookService.create(settings, client=mock_client(handler)) as hooks:
            hooks.store.add(
                make_record(7, delivery_url="https://no-such-host.invalid/hook")
            )
            hooks.bootstrap()

            hooks.publish("order.created", sample_order)
            [attempt] = await hooks.drain()

        assert attempt.outcome == "failed"
        assert hooks.store.get_record("7")["failure_count"] == 1

    @pytest.mark.asyncio
    async def test_two_webhooks_one_update(self, settings: Settings, sample_coupon: Coupon):
        received: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request.headers["X-Webhook-ID"])
            return httpx.Response(204)

        async with WebhookService.create(settings, client=mock_client(handler)) as hooks:
            hooks.store.add(make_record("a", topics=["coupon_updated"]))
            hooks.store.add(make_record("b", topics=["coupon_updated"]))
            hooks.bootstrap()

            hooks.publish("coupon.updated", sample_coupon)
            await hooks.drain()

        assert sorted(received) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_publish_deleted(self, settings: Settings, sample_order: Order):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200)

        async with WebhookService.create(settings, client=mock_client(handler)) as hooks:
            hooks.store.add(make_record(7, topics=["order_deleted"]))
            hooks.bootstrap()

            hooks.publish_deleted("order.deleted", 1001, sample_order)
            await hooks.drain()

        assert bodies[0]["id"] == 1001
        assert bodies[0]["status"] == "processing"

    @pytest.mark.asyncio
    async def test_rebootstrap_picks_up_new_webhooks(
        self, settings: Settings, sample_order: Order
    ):
        async with WebhookService.create(
            settings, client=mock_client(lambda r: httpx.Response(200))
        ) as hooks:
            hooks.bootstrap()
            hooks.store.add(make_record(7))

            hooks.publish("order.created", sample_order)
            assert len(hooks.queue) == 0

            hooks.rebootstrap()
            hooks.publish("order.created", sample_order)
            assert len(hooks.queue) == 1

    @pytest.mark.asyncio
    async def test_drain_requires_in_memory_queue(self, settings: Settings):
        external = MagicMock()
        service = WebhookService.create(settings, queue=external)

        assert service.worker is None
        with pytest.raises(RuntimeError):
            await service.drain()
        await service.close()
