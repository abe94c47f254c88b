from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.core.repositories.document_store import get_document_store
from modules.orders.constants import OrderStatus
from modules.orders.repositories.document_repository import OrderDocumentRepository
from modules.products.entities import Product
from modules.products.repositories.document_repository import (
    ProductDocumentRepository,
)
from modules.updates.repositories.document_repository import (
    SystemUpdateDocumentRepository,
)

SEED_PRODUCTS = [
    ("Ankara Print Shirt", "Cotton shirt with ankara print.", "12500", 40, "Size", "L"),
    ("Leather Sandals", "Handmade leather sandals.", "18000", 25, "Size", "42"),
    ("Beaded Necklace", "Glass bead necklace.", "6500", 60, None, None),
    ("Adire Scarf", "Hand-dyed adire scarf.", "9000", 8, "Colour", "Indigo"),
    ("Woven Basket", "Raffia storage basket.", "15000", 3, None, None),
]

SEED_CUSTOMERS = [
    ("Ada Obi", "Obi Ventures", "+2348012345678", "ada@example.com", "12 Allen Ave, Ikeja"),
    ("Tunde Bello", "", "+2348098765432", "tunde@example.com", "4 Bode Thomas, Surulere"),
    ("Ngozi Eze", "Eze & Co", "+2348055555555", "ngozi@example.com", "7 Ogui Rd, Enugu"),
]


class Command(BaseCommand):
    help = "Seed the document store with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        store = get_document_store()
        users_created = self._seed_users()
        products = self._seed_products(ProductDocumentRepository(store))
        orders_created = self._seed_orders(OrderDocumentRepository(store), products)
        updates_created = self._seed_updates(SystemUpdateDocumentRepository(store))

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"updates={updates_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return 0
        User.objects.create_superuser("admin", password="admin123")
        return 1

    def _seed_products(self, repository: ProductDocumentRepository) -> list[Product]:
        self.stdout.write("Creating products...")
        now = timezone.now()
        products = []
        for name, description, price, quantity, variant, value in SEED_PRODUCTS:
            products.append(
                repository.create(
                    {
                        "product_name": name,
                        "description": description,
                        "price": Decimal(price),
                        "images": [f"https://images.example.com/{name.lower().replace(' ', '-')}.jpg"],
                        "quantity": quantity,
                        "variants": [{"name": variant, "value": value}] if variant else [],
                        "created_at": now,
                        "updated_at": now,
                    }
                )
            )
        return products

    def _seed_orders(
        self, repository: OrderDocumentRepository, products: list[Product]
    ) -> int:
        self.stdout.write("Creating orders...")
        statuses = [OrderStatus.PENDING] * 4 + [OrderStatus.APPROVED, OrderStatus.CANCELLED]
        created = 0
        for index, order_status in enumerate(statuses):
            chosen = random.sample(products, k=random.randint(1, 3))
            items = []
            for product in chosen:
                quantity = random.randint(1, 4)
                items.append(
                    {
                        "product_id": product.id,
                        "product_name": product.product_name,
                        "quantity": quantity,
                        "price": product.price,
                        "final_price": product.price * quantity,
                        "selected_variant": product.variants[0].model_dump()
                        if product.variants
                        else None,
                    }
                )
            name, company, phone, email, address = SEED_CUSTOMERS[index % len(SEED_CUSTOMERS)]
            created_at = timezone.now() - timedelta(days=len(statuses) - index)
            repository.create(
                {
                    "status": order_status,
                    "items": items,
                    "total_amount": sum((i["final_price"] for i in items), Decimal("0")),
                    "customer_details": {
                        "full_name": name,
                        "company_name": company,
                        "phone": phone,
                        "email": email,
                        "address": address,
                    },
                    "created_at": created_at,
                    "approved_at": created_at + timedelta(hours=2)
                    if order_status == OrderStatus.APPROVED
                    else None,
                }
            )
            created += 1
        return created

    def _seed_updates(self, repository: SystemUpdateDocumentRepository) -> int:
        now = timezone.now()
        repository.create(
            {
                "title": "Order approval now adjusts stock",
                "body": "Approving an order deducts every line item from product stock.",
                "created_at": now,
                "updated_at": now,
            }
        )
        return 1
