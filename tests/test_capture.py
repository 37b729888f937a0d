"""Tests for payload capture."""

from __future__ import annotations

import json
from typing import Any

import pytest

from hookpost.capture import (
    PayloadBuilder,
    capture_coupon,
    capture_customer,
    capture_deleted,
    capture_order,
    capture_product,
    prefixed_meta,
)
from hookpost.models import Address, Customer, Order, Product


class BrokenSection:
    """Entity proxy whose named attribute fails to load."""

    def __init__(self, entity: Any, *broken: str) -> None:
        self._entity = entity
        self._broken = set(broken)

    def __getattr__(self, name: str) -> Any:
        if name in self._broken:
            raise RuntimeError(f"{name} table unavailable")
        return getattr(self._entity, name)


def encode(payload: dict) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


class TestCaptureOrder:
    """Tests for order payloads."""

    def test_field_order(self, sample_order: Order):
        payload = capture_order(sample_order)
        assert list(payload) == [
            "id",
            "is_editable",
            "currency",
            "status",
            "paid_status",
            "date_paid_gmt",
            "type",
            "tax_amount",
            "refunds_total",
            "subtotal_amount",
            "date_created_gmt",
            "order_placed_date_gmt",
            "coupons",
            "shipping_total",
            "fees",
            "taxes",
            "total_amount",
            "customer_id",
            "customer_email",
            "customer_name",
            "billing_email",
            "payment_method",
            "payment_method_title",
            "transaction_id",
            "customer_note",
            "is_auto_complete_digital_order",
            "purchase_items",
            "refunds",
            "billing_address",
            "shipping_address",
            "meta_data",
            "order_billing_address",
        ]

    def test_values_are_json_safe(self, sample_order: Order):
        payload = capture_order(sample_order)
        assert payload["id"] == 1001
        assert payload["total_amount"] == "52.50"
        assert payload["date_created_gmt"] == "2024-05-01T12:30:00Z"
        assert payload["customer_name"] == "Ada Lovelace"
        assert payload["coupons"] == [{"code": "SPRING", "amount": "2.00"}]
        assert payload["purchase_items"][0]["product_qty"] == 2
        json.dumps(payload)

    def test_refund_amount_is_absolute(self, sample_order: Order):
        refund = capture_order(sample_order)["refunds"][0]
        assert refund["amount"] == "5.00"
        assert refund["refund_by"] == {
            "user_id": 1,
            "name": "Shop Admin",
            "display_name": "admin",
        }

    def test_missing_country_renders_dash(self, sample_order: Order):
        payload = capture_order(sample_order)
        assert payload["billing_address"]["country"] == "GB"
        assert payload["shipping_address"]["country"] == "-"

    def test_billing_alias(self, sample_order: Order):
        payload = capture_order(sample_order)
        assert payload["order_billing_address"] == payload["billing_address"]
        assert payload["order_billing_address"] is not payload["billing_address"]

    def test_capture_is_byte_identical(self, sample_order: Order):
        assert encode(capture_order(sample_order)) == encode(capture_order(sample_order))

    def test_capture_does_not_alias_entity(self, sample_order: Order):
        payload = capture_order(sample_order)
        sample_order.meta_data["gift_message"] = "changed"
        assert payload["meta_data"] == {"gift_message": "Happy birthday"}

    def test_failed_section_is_omitted(self, sample_order: Order):
        payload = capture_order(BrokenSection(sample_order, "refunds"))
        assert "refunds" not in payload
        assert payload["purchase_items"]
        assert payload["id"] == 1001

    def test_several_failed_sections(self, sample_order: Order):
        payload = capture_order(BrokenSection(sample_order, "coupons", "fees", "meta_data"))
        assert "coupons" not in payload
        assert "fees" not in payload
        assert "meta_data" not in payload
        assert "taxes" in payload


class TestCaptureProduct:
    """Tests for product and coupon payloads."""

    def test_meta_prefix_stripped(self, sample_product: Product):
        payload = capture_product(sample_product)
        assert payload["meta"] == {"sku": "DE-1", "stock": "12"}

    def test_custom_meta_prefix(self, sample_product: Product):
        payload = capture_product(sample_product, meta_prefix="_edit_")
        assert payload["meta"] == {"lock": "1714566600:1"}

    def test_prices(self, sample_product: Product):
        price = capture_product(sample_product)["prices"][0]
        assert price["name"] == "Standard"
        assert price["price"] == "20.00"
        assert price["compare_price"] == "25.00"
        assert price["is_setup_fee"] is False

    def test_prices_failure_keeps_meta(self, sample_product: Product):
        payload = capture_product(BrokenSection(sample_product, "prices"))
        assert "prices" not in payload
        assert payload["meta"] == {"sku": "DE-1", "stock": "12"}

    def test_coupon(self, sample_coupon):
        payload = capture_coupon(sample_coupon)
        assert payload["code"] == "SPRING"
        assert payload["amount"] == "10"
        assert payload["meta"] == {"coupon_start_date": "2024-04-01"}


class TestCaptureCustomer:
    def test_customer(self, sample_customer: Customer):
        payload = capture_customer(sample_customer)
        assert payload["email"] == "ada@example.com"
        assert payload["billing_address"]["city"] == "London"
        assert payload["shipping_address"] is None
        assert payload["meta"] == {"marketing_opt_in": "yes"}

    def test_customer_address_without_country(self):
        customer = Customer(id=1, email="x@example.com", billing=Address(city="Paris"))
        assert capture_customer(customer)["billing_address"]["country"] == "-"


class TestCaptureDeleted:
    """Tests for delete payloads."""

    def test_snapshot_mapping_merged_with_id(self):
        payload = capture_deleted(55, {"id": 1, "title": "Old title"})
        assert payload == {"id": 55, "title": "Old title"}

    def test_snapshot_entity_captured(self, sample_product: Product):
        payload = capture_deleted(77, sample_product, capture_product)
        assert payload["id"] == 77
        assert payload["title"] == "Difference Engine"

    def test_no_snapshot(self):
        assert capture_deleted("abc", None) == {"id": "abc"}

    def test_snapshot_not_mutated(self):
        snapshot = {"id": 1, "tags": ["a"]}
        capture_deleted(2, snapshot)
        assert snapshot == {"id": 1, "tags": ["a"]}

    def test_non_mapping_snapshot_rejected(self):
        with pytest.raises(TypeError):
            capture_deleted(1, ["not", "a", "mapping"])


class TestHelpers:
    def test_prefixed_meta(self):
        meta = {"_storeengine_a": 1, "_storeengine_b": [], "other": 3}
        assert prefixed_meta(meta) == {"a": 1, "b": None}

    def test_builder_records_omitted(self):
        builder = PayloadBuilder("order", 1)
        builder.set("id", 1)
        builder.optional("fees", lambda: 1 / 0)
        assert builder.build() == {"id": 1}
        assert builder.omitted == ["fees"]
