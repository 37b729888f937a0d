"""Models for Hookpost.

Webhook Types:
    - WebhookConfig: Subscription record (URL, secret, topics, status)
    - DeliveryJob: Captured payload queued for one webhook
    - DeliveryAttempt: One HTTP request made for a job

Entity Types:
    - Product, Coupon, Order, Customer: Shapes read by the payload capturers
"""

from .base import timestamp, to_json_safe, utc_now
from .entities import (
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
from .webhook import (
    DeliveryAttempt,
    DeliveryJob,
    DeliveryOutcome,
    DeliveryRequest,
    DeliveryResponse,
    WebhookConfig,
    WebhookStatus,
)

__all__ = [
    # Helpers
    "timestamp",
    "to_json_safe",
    "utc_now",
    # Webhook types
    "DeliveryAttempt",
    "DeliveryJob",
    "DeliveryOutcome",
    "DeliveryRequest",
    "DeliveryResponse",
    "WebhookConfig",
    "WebhookStatus",
    # Entities
    "Address",
    "Coupon",
    "Customer",
    "Order",
    "OrderCoupon",
    "OrderFee",
    "OrderLineItem",
    "OrderRefund",
    "OrderTax",
    "Product",
    "ProductPrice",
    "RefundedBy",
]
