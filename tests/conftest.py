"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import pytest

from hookpost.config import Settings
from hookpost.events import OccurrenceBus
from hookpost.listeners import ListenerRegistry, reset_listener_registry
from hookpost.logging import clear_context
from hookpost.models import (
    Address,
    Coupon,
    Customer,
    Order,
    OrderCoupon,
    OrderFee,
    OrderLineItem,
    OrderRefund,
    OrderTax,
    Product,
    ProductPrice,
    RefundedBy,
)
from hookpost.queue import InMemoryDeliveryQueue
from hookpost.registry import WebhookRegistryReader
from hookpost.storage import InMemoryWebhookStore

# Add tests directory to path so helpers can be imported
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

CREATED = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


def make_record(webhook_id: str | int = "7", **overrides: Any) -> dict[str, Any]:
    """Build a published webhook record subscribed to order.created."""
    record: dict[str, Any] = {
        "id": webhook_id,
        "delivery_url": "https://receiver.example.com/hooks",
        "secret": "s3cret-key",
        "topics": ["order_created"],
        "status": "published",
        "failure_count": 0,
    }
    record.update(overrides)
    return record


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def _reset_globals() -> Iterator[None]:
    yield
    reset_listener_registry()
    clear_context()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        source_url="https://shop.example.com/",
        delivery_salt="test-salt",
    )


@pytest.fixture
def store() -> InMemoryWebhookStore:
    return InMemoryWebhookStore()


@pytest.fixture
def queue() -> InMemoryDeliveryQueue:
    return InMemoryDeliveryQueue()


@pytest.fixture
def bus() -> OccurrenceBus:
    return OccurrenceBus()


@pytest.fixture
def registry(
    store: InMemoryWebhookStore,
    queue: InMemoryDeliveryQueue,
    bus: OccurrenceBus,
    settings: Settings,
) -> ListenerRegistry:
    return ListenerRegistry(WebhookRegistryReader(store), queue, bus, settings)


@pytest.fixture
def billing_address() -> Address:
    return Address(
        first_name="Ada",
        last_name="Lovelace",
        address_1="12 Analytical Row",
        city="London",
        postcode="N1 9GU",
        country="GB",
        email="ada@example.com",
        phone="+44 20 7946 0000",
    )


@pytest.fixture
def sample_order(billing_address: Address) -> Order:
    return Order(
        id=1001,
        status="processing",
        paid_status="paid",
        currency="GBP",
        is_editable=True,
        date_created_gmt=CREATED,
        date_paid_gmt=CREATED,
        order_placed_date_gmt=CREATED,
        subtotal=Decimal("40.00"),
        total_tax=Decimal("8.00"),
        shipping_total=Decimal("4.50"),
        total_refunded=Decimal("5.00"),
        total=Decimal("52.50"),
        customer_id=42,
        order_email="ada@example.com",
        billing=billing_address,
        shipping=Address(first_name="Ada", last_name="Lovelace", city="London"),
        payment_method="stripe",
        payment_method_title="Card",
        transaction_id="txn_123",
        coupons=[OrderCoupon(code="SPRING", discount=Decimal("2.00"))],
        fees=[OrderFee(id=1, name="Gift wrap", amount=Decimal("1.50"), total=Decimal("1.50"))],
        tax_totals=[OrderTax(code="GB-VAT", label="VAT", amount=Decimal("8.00"))],
        line_items=[
            OrderLineItem(
                id=501,
                product_id=77,
                product_name="Difference Engine",
                quantity=2,
                price=Decimal("20.00"),
            )
        ],
        refunds=[
            OrderRefund(
                id=9,
                total=Decimal("-5.00"),
                refunded_by=RefundedBy(
                    user_id=1, first_name="Shop", last_name="Admin", display_name="admin"
                ),
                date_created_gmt=CREATED,
            )
        ],
        meta_data={"gift_message": "Happy birthday"},
    )


@pytest.fixture
def sample_product() -> Product:
    return Product(
        id=77,
        title="Difference Engine",
        slug="difference-engine",
        description="Computes tables",
        author_id=1,
        date_created_gmt=CREATED,
        date_modified_gmt=CREATED,
        meta={
            "_storeengine_sku": "DE-1",
            "_storeengine_stock": ["12"],
            "_edit_lock": "1714566600:1",
        },
        prices=[
            ProductPrice(
                name="Standard",
                price=Decimal("20.00"),
                compare_price=Decimal("25.00"),
            )
        ],
    )


@pytest.fixture
def sample_coupon() -> Coupon:
    return Coupon(
        id=31,
        code="SPRING",
        amount=Decimal("10"),
        usage_limit=100,
        usage_count=3,
        date_created_gmt=CREATED,
        meta={"_storeengine_coupon_start_date": "2024-04-01"},
    )


@pytest.fixture
def sample_customer(billing_address: Address) -> Customer:
    return Customer(
        id=42,
        email="ada@example.com",
        first_name="Ada",
        last_name="Lovelace",
        display_name="ada",
        username="ada",
        date_created_gmt=CREATED,
        billing=billing_address,
        meta={"_storeengine_marketing_opt_in": "yes"},
    )
