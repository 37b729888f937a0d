"""Customer payload capture."""

from __future__ import annotations

from typing import Any

from .base import DEFAULT_META_PREFIX, PayloadBuilder, address, prefixed_meta


def capture_customer(customer: Any, meta_prefix: str = DEFAULT_META_PREFIX) -> dict[str, Any]:
    """Snapshot a customer account.

    Addresses are optional sections; a customer without a saved address
    exports ``null`` for it.
    """
    builder = PayloadBuilder("customer", customer.id)
    builder.set("id", customer.id)
    builder.set("email", customer.email)
    builder.set("first_name", customer.first_name)
    builder.set("last_name", customer.last_name)
    builder.set("display_name", customer.display_name)
    builder.set("username", customer.username)
    builder.set("date_created_gmt", customer.date_created_gmt)
    builder.optional("billing_address", lambda: _maybe_address(customer.billing))
    builder.optional("shipping_address", lambda: _maybe_address(customer.shipping))
    builder.optional("meta", lambda: prefixed_meta(customer.meta, meta_prefix))
    return builder.build()


def _maybe_address(addr: Any) -> dict[str, Any] | None:
    return address(addr) if addr is not None else None
