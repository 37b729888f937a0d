"""Order payload capture."""

from __future__ import annotations

from typing import Any

from .base import PayloadBuilder, address


def capture_order(order: Any) -> dict[str, Any]:
    """Snapshot an order with its totals, items, refunds and addresses.

    Coupons, fees, taxes, purchase items, refunds and meta data are
    optional sections: if one fails to load it is omitted from the payload.

    Args:
        order: Order entity (see ``hookpost.models.Order``).

    Returns:
        JSON-safe payload.
    """
    billing = order.billing
    shipping = order.shipping

    builder = PayloadBuilder("order", order.id)
    builder.set("id", order.id)
    builder.set("is_editable", order.is_editable)
    builder.set("currency", order.currency)
    builder.set("status", order.status)
    builder.set("paid_status", order.paid_status)
    builder.set("date_paid_gmt", order.date_paid_gmt or None)
    builder.set("type", order.type)
    builder.set("tax_amount", order.total_tax)
    builder.set("refunds_total", order.total_refunded)
    builder.set("subtotal_amount", order.subtotal)
    builder.set("date_created_gmt", order.date_created_gmt)
    builder.set("order_placed_date_gmt", order.order_placed_date_gmt or None)
    builder.optional("coupons", lambda: _coupons(order))
    builder.set("shipping_total", order.shipping_total)
    builder.optional("fees", lambda: _fees(order))
    builder.optional("taxes", lambda: _taxes(order))
    builder.set("total_amount", order.total)
    builder.set("customer_id", order.customer_id)
    builder.set("customer_email", order.order_email)
    builder.set("customer_name", f"{billing.first_name} {billing.last_name}".strip())
    builder.set("billing_email", billing.email)
    builder.set("payment_method", order.payment_method)
    builder.set("payment_method_title", order.payment_method_title)
    builder.set("transaction_id", order.transaction_id)
    builder.set("customer_note", order.customer_note)
    builder.set("is_auto_complete_digital_order", order.auto_complete_digital_order)
    builder.optional("purchase_items", lambda: _line_items(order))
    builder.optional("refunds", lambda: _refunds(order))
    builder.set("billing_address", address(billing))
    builder.set("shipping_address", address(shipping))
    builder.optional("meta_data", lambda: dict(order.meta_data))

    payload = builder.build()
    # Deprecated alias, still read by older receivers
    payload["order_billing_address"] = dict(payload["billing_address"])
    return payload


def _coupons(order: Any) -> list[dict[str, Any]]:
    return [{"code": coupon.code, "amount": coupon.discount} for coupon in order.coupons]


def _fees(order: Any) -> list[dict[str, Any]]:
    return [
        {
            "id": fee.id,
            "name": fee.name,
            "tax_class": fee.tax_class,
            "tax_status": fee.tax_status,
            "amount": fee.amount,
            "total": fee.total,
            "total_tax": fee.total_tax,
            "taxes": dict(fee.taxes),
        }
        for fee in order.fees
    ]


def _taxes(order: Any) -> list[dict[str, Any]]:
    return [
        {"code": tax.code, "label": tax.label, "amount": tax.amount} for tax in order.tax_totals
    ]


def _line_items(order: Any) -> list[dict[str, Any]]:
    return [
        {
            "id": item.id,
            "product_name": item.product_name,
            "product_id": item.product_id,
            "product_qty": item.quantity,
            "price": item.price,
            "meta_data": dict(item.meta_data),
        }
        for item in order.line_items
    ]


def _refunds(order: Any) -> list[dict[str, Any]]:
    refunds = []
    for refund in order.refunds:
        by = refund.refunded_by
        refunds.append(
            {
                "id": refund.id,
                "amount": abs(refund.total),
                "refund_by": {
                    "user_id": by.user_id if by else None,
                    "name": f"{by.first_name} {by.last_name}".strip() if by else None,
                    "display_name": by.display_name if by else None,
                },
                "created_at": refund.date_created_gmt,
            }
        )
    return refunds
