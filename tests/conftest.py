from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.products.repositories.document_repository import (
    ProductDocumentRepository,
)
from shared.infrastructure.documents import InMemoryDocumentStore


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def admin_user():
    return get_user_model().objects.create_user(username="admin", password="admin123")


@pytest.fixture()
def auth_client(api_client, admin_user):
    """APIClient authenticated as the dashboard admin."""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture()
def make_product():
    """Factory writing a product through the repository of the given store."""

    def _make(store, name="Ankara Shirt", quantity=10, price="12500.00"):
        return ProductDocumentRepository(store).create(
            {
                "product_name": name,
                "description": f"{name} description",
                "price": Decimal(price),
                "images": ["https://images.example.com/item.jpg"],
                "quantity": quantity,
                "created_at": timezone.now(),
            }
        )

    return _make


@pytest.fixture()
def make_order():
    """Factory writing an order; ``items`` is a list of (product_id, qty)."""

    def _make(store, items=(), status="pending", total="0"):
        return OrderDocumentRepository(store).create(
            {
                "status": status,
                "items": [
                    {
                        "product_id": product_id,
                        "product_name": "Item",
                        "quantity": quantity,
                        "price": Decimal("100.00"),
                        "final_price": Decimal("100.00") * quantity,
                    }
                    for product_id, quantity in items
                ],
                "total_amount": Decimal(total),
                "customer_details": {
                    "full_name": "Ada Obi",
                    "phone": "+2348012345678",
                    "email": "ada@example.com",
                },
                "created_at": timezone.now(),
            }
        )

    return _make
