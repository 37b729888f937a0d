"""Concrete listeners, one per catalog topic."""

from __future__ import annotations

from typing import Any

from hookpost.capture import capture_coupon, capture_customer, capture_order, capture_product
from hookpost.topics import to_topic

from .base import DeletedListener, Listener


class _ProductMixin:
    meta_prefix: str

    def capture_entity(self, entity: Any) -> dict[str, Any]:
        return capture_product(entity, self.meta_prefix)


class _CouponMixin:
    meta_prefix: str

    def capture_entity(self, entity: Any) -> dict[str, Any]:
        return capture_coupon(entity, self.meta_prefix)


class _OrderMixin:
    def capture_entity(self, entity: Any) -> dict[str, Any]:
        return capture_order(entity)


class _CustomerMixin:
    meta_prefix: str

    def capture_entity(self, entity: Any) -> dict[str, Any]:
        return capture_customer(entity, self.meta_prefix)


class ProductCreated(_ProductMixin, Listener):
    topic = "product.created"


class ProductUpdated(_ProductMixin, Listener):
    topic = "product.updated"


class ProductDeleted(_ProductMixin, DeletedListener):
    topic = "product.deleted"


class ProductRestored(_ProductMixin, Listener):
    topic = "product.restored"


class CouponCreated(_CouponMixin, Listener):
    topic = "coupon.created"


class CouponUpdated(_CouponMixin, Listener):
    topic = "coupon.updated"


class CouponDeleted(_CouponMixin, DeletedListener):
    topic = "coupon.deleted"


class CouponRestored(_CouponMixin, Listener):
    topic = "coupon.restored"


class OrderCreated(_OrderMixin, Listener):
    topic = "order.created"


class OrderUpdated(_OrderMixin, Listener):
    topic = "order.updated"


class OrderDeleted(_OrderMixin, DeletedListener):
    topic = "order.deleted"


class OrderRestored(_OrderMixin, Listener):
    topic = "order.restored"


class CustomerCreated(_CustomerMixin, Listener):
    topic = "customer.created"


class CustomerUpdated(_CustomerMixin, Listener):
    topic = "customer.updated"


class CustomerDeleted(_CustomerMixin, DeletedListener):
    topic = "customer.deleted"


LISTENERS: dict[str, type[Listener]] = {
    cls.topic: cls
    for cls in (
        ProductCreated,
        ProductUpdated,
        ProductDeleted,
        ProductRestored,
        CouponCreated,
        CouponUpdated,
        CouponDeleted,
        CouponRestored,
        OrderCreated,
        OrderUpdated,
        OrderDeleted,
        OrderRestored,
        CustomerCreated,
        CustomerUpdated,
        CustomerDeleted,
    )
}


def get_listener_class(topic: str) -> type[Listener] | None:
    """Map a topic (either form) to its listener class, or None if unknown."""
    return LISTENERS.get(to_topic(topic))
