"""Payload capture for webhook deliveries.

Capturers turn a domain entity into a JSON-safe dict at the moment an
occurrence fires. The result is a value: it holds no reference to the
entity, which may change or be deleted before the delivery runs.

Example:
    ```python
    from hookpost.capture import capture_order, capture_deleted

    payload = capture_order(order)
    gone = capture_deleted(order.id, snapshot, capture=capture_order)
    ```
"""

from .base import DEFAULT_META_PREFIX, PayloadBuilder, capture_deleted, prefixed_meta
from .customer import capture_customer
from .order import capture_order
from .product import capture_coupon, capture_product

__all__ = [
    "DEFAULT_META_PREFIX",
    "PayloadBuilder",
    "capture_coupon",
    "capture_customer",
    "capture_deleted",
    "capture_order",
    "capture_product",
    "prefixed_meta",
]
