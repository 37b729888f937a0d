"""Tests for the webhook topic catalog."""

import pytest

from hookpost.topics import (
    ALL_TOPIC_KEYS,
    ALL_TOPICS,
    TOPIC_CATALOG_VERSION,
    TOPIC_LABELS,
    flatten_topic_entries,
    is_known_topic,
    split_topic,
    to_key,
    to_topic,
)


class TestCatalog:
    """Tests for the fixed topic catalog."""

    def test_catalog_size(self):
        """Catalog version 1 has fifteen topics."""
        assert TOPIC_CATALOG_VERSION == "1"
        assert len(ALL_TOPIC_KEYS) == 15
        assert len(set(ALL_TOPICS)) == 15

    def test_customer_has_no_restored_topic(self):
        assert "customer_restored" not in ALL_TOPIC_KEYS
        assert "product_restored" in ALL_TOPIC_KEYS

    def test_labels(self):
        assert TOPIC_LABELS["order_created"] == "Order Created"
        assert TOPIC_LABELS["customer_deleted"] == "Customer Deleted"
        assert set(TOPIC_LABELS) == set(ALL_TOPIC_KEYS)


class TestConversion:
    """Tests for key/topic conversion."""

    def test_to_topic_splits_on_first_underscore(self):
        assert to_topic("order_created") == "order.created"
        assert to_topic("order_status_changed") == "order.status_changed"

    def test_to_topic_passes_dotted_form(self):
        assert to_topic("coupon.updated") == "coupon.updated"

    def test_to_topic_without_separator(self):
        assert to_topic("order") == "order"

    def test_to_key(self):
        assert to_key("product.deleted") == "product_deleted"

    def test_split_topic(self):
        assert split_topic("order.created") == ("order", "created")
        assert split_topic("customer_updated") == ("customer", "updated")

    @pytest.mark.parametrize("bad", ["order", "", ".created", "order."])
    def test_split_topic_malformed(self, bad):
        with pytest.raises(ValueError):
            split_topic(bad)

    def test_is_known_topic(self):
        assert is_known_topic("order.created")
        assert is_known_topic("order_created")
        assert not is_known_topic("order.shipped")
        assert not is_known_topic("customer_restored")


class TestFlattenTopicEntries:
    """Tests for legacy topic flattening."""

    def test_flat_list_is_unchanged(self):
        assert flatten_topic_entries(["order_created", "coupon_updated"]) == (
            ["order_created", "coupon_updated"],
            False,
        )

    def test_legacy_entries_flattened(self):
        keys, legacy = flatten_topic_entries(
            [{"value": "order_created", "label": "Order Created"}, {"value": "order_updated"}]
        )
        assert keys == ["order_created", "order_updated"]
        assert legacy is True

    def test_duplicates_and_empties_removed_in_order(self):
        keys, legacy = flatten_topic_entries(
            ["order_created", {"value": ""}, {"value": "order_created"}, "", None, "product_created"]
        )
        assert keys == ["order_created", "product_created"]
        assert legacy is True

    def test_non_list_is_empty(self):
        assert flatten_topic_entries(None) == ([], False)
        assert flatten_topic_entries("order_created") == ([], False)
