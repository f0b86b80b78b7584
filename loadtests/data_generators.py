"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that match the exact field names expected by
the Orders API's Pydantic request schemas. Product ids refer to the demo
catalogue loaded by ``python src/manage.py seed-products``.
"""

import random

from faker import Faker

fake = Faker()

# Ids assigned to the demo products on a freshly seeded database
SEEDED_PRODUCT_IDS = [1, 2, 3, 4, 5]
ORDER_STATUSES = ["new", "in_process", "done"]


def user_id() -> int:
    return fake.random_int(min=1, max=10_000)


def order_data() -> dict:
    """Generate CreateOrderRequest payload."""
    return {"user_id": user_id(), "status": "new"}


def order_item_data(product_ids=None, max_quantity: int = 3) -> dict:
    """Generate AddOrderItemRequest payload for one of the seeded products."""
    return {
        "product_id": random.choice(product_ids or SEEDED_PRODUCT_IDS),
        "quantity": random.randint(1, max_quantity),
    }


def order_update_data() -> dict:
    """Generate UpdateOrderRequest payload."""
    return {"status": random.choice(ORDER_STATUSES)}
