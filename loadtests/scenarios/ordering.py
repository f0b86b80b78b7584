"""Ordering load test scenarios.

OrderJourney walks one order through its life: create it, add a few items,
read it back, then move its status along. Running out of stock is an
expected outcome under load and is counted rather than failed.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import order_data, order_item_data, order_update_data
from loadtests.helpers.response import extract_error_detail, is_stock_refusal
from loadtests.helpers.state import OrderState


class OrderJourney(SequentialTaskSet):
    """Create Order -> Add Item (x3) -> Get Order -> Update Status."""

    def on_start(self):
        self.state = OrderState()

    @task
    def create_order(self):
        with self.client.post(
            "/orders",
            json=order_data(),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Create order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    def _add_item(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/order",
            json=order_item_data(),
            catch_response=True,
            name="POST /orders/{id}/order",
        ) as resp:
            if resp.status_code == 201:
                self.state.item_ids.append(resp.json()["item_id"])
            elif is_stock_refusal(resp):
                self.state.stock_refusals += 1
                resp.success()
            else:
                resp.failure(f"Add item failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def add_item_1(self):
        self._add_item()

    @task
    def add_item_2(self):
        self._add_item()

    @task
    def add_item_3(self):
        self._add_item()

    @task
    def get_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif len(resp.json()["items"]) != len(self.state.item_ids):
                resp.failure("Order items do not match the items that were added")

    @task
    def update_status(self):
        with self.client.put(
            f"/orders/{self.state.order_id}",
            json=order_update_data(),
            catch_response=True,
            name="PUT /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Simulated customer placing orders."""

    tasks = [OrderJourney]
    wait_time = between(0.5, 2)
