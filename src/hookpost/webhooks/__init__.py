"""Outbound webhook delivery."""

from .delivery import (
    DeliveryHook,
    WebhookDispatcher,
    compute_signature,
    default_user_agent,
    encode_payload,
    generate_delivery_id,
    verify_signature,
)

__all__ = [
    "DeliveryHook",
    "WebhookDispatcher",
    "compute_signature",
    "default_user_agent",
    "encode_payload",
    "generate_delivery_id",
    "verify_signature",
]
