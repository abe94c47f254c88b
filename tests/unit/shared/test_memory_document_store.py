"""Unit tests for the in-memory document store."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shared.domain.documents import DocumentNotFound, DocumentStoreError
from shared.infrastructure.documents import InMemoryDocumentStore

pytestmark = pytest.mark.unit


@pytest.fixture()
def store():
    return InMemoryDocumentStore()


class TestCrud:
    def test_create_assigns_unique_keys(self, store):
        first = store.create("products", {"productName": "A"})
        second = store.create("products", {"productName": "B"})
        assert first != second
        assert store.get("products", first) == {"productName": "A"}

    def test_get_missing_returns_none(self, store):
        assert store.get("products", "nope") is None

    def test_values_are_json_normalised(self, store):
        key = store.create(
            "orders",
            {
                "totalAmount": Decimal("250.50"),
                "createdAt": datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
            },
        )
        data = store.get("orders", key)
        assert data["totalAmount"] == "250.50"
        assert data["createdAt"].startswith("2024-05-01T09:30:00")

    def test_returned_documents_are_copies(self, store):
        key = store.create("products", {"quantity": 3})
        store.get("products", key)["quantity"] = 99
        assert store.get("products", key)["quantity"] == 3

    def test_update_merges_fields(self, store):
        key = store.create("orders", {"status": "pending", "notes": "call first"})
        store.update("orders", key, {"status": "approved"})
        assert store.get("orders", key) == {"status": "approved", "notes": "call first"}

    def test_update_missing_raises(self, store):
        with pytest.raises(DocumentNotFound):
            store.update("orders", "ghost", {"status": "approved"})
        assert store.get("orders", "ghost") is None

    def test_set_replaces_document(self, store):
        store.set("updates", "u1", {"title": "a", "body": "b"})
        store.set("updates", "u1", {"title": "c"})
        assert store.get("updates", "u1") == {"title": "c"}

    def test_delete(self, store):
        key = store.create("products", {})
        assert store.delete("products", key) is True
        assert store.delete("products", key) is False

    def test_list_is_scoped_to_collection(self, store):
        store.create("products", {"productName": "A"})
        store.create("orders", {"status": "pending"})
        listed = store.list("products")
        assert [data for _, data in listed] == [{"productName": "A"}]


class TestIncrement:
    def test_decrement_returns_before_and_after(self, store):
        key = store.create("products", {"quantity": 10})
        assert store.increment("products", key, "quantity", -4) == (10, 6)
        assert store.get("products", key)["quantity"] == 6

    def test_minimum_clamps_result(self, store):
        key = store.create("products", {"quantity": 2})
        assert store.increment("products", key, "quantity", -5, minimum=0) == (2, 0)

    def test_missing_field_counts_as_zero(self, store):
        key = store.create("products", {"productName": "No stock field"})
        assert store.increment("products", key, "quantity", 3) == (0, 3)

    def test_missing_document_raises_and_writes_nothing(self, store):
        with pytest.raises(DocumentNotFound):
            store.increment("products", "ghost", "quantity", -1, minimum=0)
        assert store.list("products") == []

    @pytest.mark.parametrize(
        "stored, expected", [("7", (7, 6)), (7.0, (7, 6)), (None, (0, -1))]
    )
    def test_whole_number_variants_are_read(self, store, stored, expected):
        key = store.create("products", {"quantity": stored})
        assert store.increment("products", key, "quantity", -1) == expected

    @pytest.mark.parametrize("stored", ["abc", {}, [3], 2.5, True])
    def test_non_integer_counter_raises_store_error(self, store, stored):
        key = store.create("products", {"quantity": stored})

        with pytest.raises(DocumentStoreError, match="not an integer"):
            store.increment("products", key, "quantity", -1, minimum=0)

        assert store.get("products", key)["quantity"] == stored
