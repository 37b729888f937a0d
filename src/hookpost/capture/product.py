"""Product and coupon payload capture."""

from __future__ import annotations

from typing import Any

from .base import DEFAULT_META_PREFIX, PayloadBuilder, prefixed_meta


def capture_product(product: Any, meta_prefix: str = DEFAULT_META_PREFIX) -> dict[str, Any]:
    """Snapshot a product with its store meta and prices.

    ``meta`` and ``prices`` are optional sections.
    """
    builder = PayloadBuilder("product", product.id)
    builder.set("id", product.id)
    builder.set("title", product.title)
    builder.set("slug", product.slug)
    builder.set("status", product.status)
    builder.set("type", product.type)
    builder.set("description", product.description)
    builder.set("short_description", product.short_description)
    builder.set("author_id", product.author_id)
    builder.set("date_created_gmt", product.date_created_gmt)
    builder.set("date_modified_gmt", product.date_modified_gmt)
    builder.optional("meta", lambda: prefixed_meta(product.meta, meta_prefix))
    builder.optional("prices", lambda: [_price(price) for price in product.prices])
    return builder.build()


def _price(price: Any) -> dict[str, Any]:
    return {
        "name": price.name,
        "price": price.price,
        "compare_price": price.compare_price,
        "menu_order": price.menu_order,
        "is_setup_fee": price.setup_fee,
        "setup_fee_name": price.setup_fee_name,
        "setup_fee_price": price.setup_fee_price,
        "setup_fee_type": price.setup_fee_type,
        "is_trial": price.trial,
        "trial_days": price.trial_days,
        "is_expire": price.expire,
        "expire_days": price.expire_days,
        "payment_duration": price.payment_duration,
        "payment_duration_type": price.payment_duration_type,
        "is_upgradeable": price.upgradeable,
    }


def capture_coupon(coupon: Any, meta_prefix: str = DEFAULT_META_PREFIX) -> dict[str, Any]:
    """Snapshot a coupon and its store meta."""
    builder = PayloadBuilder("coupon", coupon.id)
    builder.set("id", coupon.id)
    builder.set("code", coupon.code)
    builder.set("status", coupon.status)
    builder.set("discount_type", coupon.discount_type)
    builder.set("amount", coupon.amount)
    builder.set("description", coupon.description)
    builder.set("usage_limit", coupon.usage_limit)
    builder.set("usage_count", coupon.usage_count)
    builder.set("minimum_amount", coupon.minimum_amount)
    builder.set("expires_at", coupon.expires_at)
    builder.set("date_created_gmt", coupon.date_created_gmt)
    builder.set("date_modified_gmt", coupon.date_modified_gmt)
    builder.optional("meta", lambda: prefixed_meta(coupon.meta, meta_prefix))
    return builder.build()
