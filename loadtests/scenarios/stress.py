"""Stress test scenarios for stock contention.

HotProductUser has every simulated user add single units of the same product
as fast as possible. Once the stock is gone every further request must be
refused with a 400; a 500 here points at a locking or retry problem.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import SEEDED_PRODUCT_IDS, order_data
from loadtests.helpers.response import extract_error_detail, is_stock_refusal

HOT_PRODUCT_ID = SEEDED_PRODUCT_IDS[-1]


class HotProductUser(HttpUser):
    """Stress test: many concurrent reservations against one product row."""

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    def on_start(self):
        resp = self.client.post("/orders", json=order_data(), name="[STRESS] POST /orders")
        self.order_id = resp.json()["order_id"] if resp.status_code == 201 else None

    @task
    def grab_one(self):
        if self.order_id is None:
            return
        with self.client.post(
            f"/orders/{self.order_id}/order",
            json={"product_id": HOT_PRODUCT_ID, "quantity": 1},
            catch_response=True,
            name="[STRESS] POST /orders/{id}/order",
        ) as resp:
            if resp.status_code == 201 or is_stock_refusal(resp):
                resp.success()
            else:
                resp.failure(f"Reservation failed: {resp.status_code}: {extract_error_detail(resp)}")
