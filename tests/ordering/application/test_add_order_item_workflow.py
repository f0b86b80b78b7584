"""Application tests for the add-item fulfillment workflow."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest
from catalogue.product.product import InsufficientStock
from ordering.fulfillment.workflow import OrderFulfillment
from ordering.store.port import StoreFailure
from protean.exceptions import ObjectNotFoundError, ValidationError


def _product(storage, product_id):
    return storage.atomic(lambda stores: stores.products.get_by_id(product_id))


def _order(storage, order_id):
    return storage.atomic(lambda stores: stores.orders.get_by_id(order_id))


def _items(storage, order_id):
    return storage.atomic(lambda stores: stores.orders.items_for(order_id))


class TestAddOrderItem:
    def test_worked_example(self, storage, add_product, add_order):
        product = add_product(price=10.0, quantity=5)
        order = add_order()

        item = OrderFulfillment(storage).add_order_item(order.id, product.id, 3)

        assert _product(storage, product.id).quantity == 2
        assert _order(storage, order.id).total == 30.0
        assert item.quantity == 3
        assert item.price == 10.0
        assert item.order_id == order.id
        assert item.product_id == product.id

    def test_item_is_listed_on_the_order(self, storage, add_product, add_order):
        product = add_product()
        order = add_order()

        item = OrderFulfillment(storage).add_order_item(order.id, product.id, 1)

        assert [i.id for i in _items(storage, order.id)] == [item.id]

    def test_totals_accumulate_across_products(self, storage, add_product, add_order):
        widget = add_product(name="Widget", price=10.0, quantity=5)
        gadget = add_product(name="Gadget", price=2.5, quantity=10)
        order = add_order()
        workflow = OrderFulfillment(storage)

        workflow.add_order_item(order.id, widget.id, 2)
        workflow.add_order_item(order.id, gadget.id, 4)

        assert _order(storage, order.id).total == 30.0
        assert len(_items(storage, order.id)) == 2

    def test_item_keeps_price_at_time_of_adding(self, storage, add_product, add_order):
        product = add_product(price=10.0, quantity=5)
        order = add_order()
        OrderFulfillment(storage).add_order_item(order.id, product.id, 1)

        def raise_price(stores):
            current = stores.products.get_by_id(product.id, for_update=True)
            current.price = 99.0
            stores.products.update(product.id, current)

        storage.atomic(raise_price)

        assert _items(storage, order.id)[0].price == 10.0
        assert _order(storage, order.id).total == 10.0

    def test_repeated_calls_are_not_deduplicated(self, storage, add_product, add_order):
        product = add_product(price=10.0, quantity=5)
        order = add_order()
        workflow = OrderFulfillment(storage)

        workflow.add_order_item(order.id, product.id, 2)
        workflow.add_order_item(order.id, product.id, 2)

        assert _product(storage, product.id).quantity == 1
        assert _order(storage, order.id).total == 40.0
        assert len(_items(storage, order.id)) == 2

    def test_order_user_and_status_are_untouched(self, storage, add_product, add_order):
        product = add_product()
        order = add_order(user_id=9, status="in_process")

        OrderFulfillment(storage).add_order_item(order.id, product.id, 1)

        updated = _order(storage, order.id)
        assert updated.user_id == 9
        assert updated.status == "in_process"


class TestAddOrderItemFailures:
    def test_insufficient_stock_changes_nothing(self, storage, add_product, add_order):
        product = add_product(price=10.0, quantity=5)
        order = add_order()
        workflow = OrderFulfillment(storage)
        workflow.add_order_item(order.id, product.id, 3)

        with pytest.raises(InsufficientStock):
            workflow.add_order_item(order.id, product.id, 10)

        assert _product(storage, product.id).quantity == 2
        assert _order(storage, order.id).total == 30.0
        assert len(_items(storage, order.id)) == 1

    def test_unknown_product(self, storage, add_order):
        order = add_order()

        with pytest.raises(ObjectNotFoundError):
            OrderFulfillment(storage).add_order_item(order.id, 999, 1)

        assert _order(storage, order.id).total == 0.0
        assert _items(storage, order.id) == []

    def test_unknown_order_rolls_back_reservation(self, storage, add_product):
        product = add_product(quantity=5)

        with pytest.raises(ObjectNotFoundError):
            OrderFulfillment(storage).add_order_item(999, product.id, 2)

        assert _product(storage, product.id).quantity == 5
        assert _items(storage, 999) == []

    def test_unknown_product_is_reported_before_unknown_order(self, storage):
        with pytest.raises(ObjectNotFoundError) as exc:
            OrderFulfillment(storage).add_order_item(999, 998, 1)
        assert "Product 998" in str(exc.value)

    def test_insufficient_stock_is_reported_before_unknown_order(self, storage, add_product):
        product = add_product(quantity=1)
        with pytest.raises(InsufficientStock):
            OrderFulfillment(storage).add_order_item(999, product.id, 2)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity(self, storage, add_product, add_order, quantity):
        product = add_product(quantity=5)
        order = add_order()

        with pytest.raises(ValidationError):
            OrderFulfillment(storage).add_order_item(order.id, product.id, quantity)

        assert _product(storage, product.id).quantity == 5

    def test_store_failure_after_reservation_rolls_back(self, storage, add_product, add_order):
        product = add_product(price=10.0, quantity=5)
        order = add_order()
        orders_store = storage._stores.orders

        with patch.object(orders_store, "update", side_effect=StoreFailure("disk full")):
            with pytest.raises(StoreFailure):
                OrderFulfillment(storage).add_order_item(order.id, product.id, 3)

        assert _product(storage, product.id).quantity == 5
        assert _order(storage, order.id).total == 0.0
        assert _items(storage, order.id) == []


class TestConcurrentReservations:
    def test_stock_is_never_oversold(self, storage, add_product, add_order):
        from ordering.domain import ordering

        stock = 7
        attempts = 25
        product = add_product(price=1.0, quantity=stock)
        order = add_order()
        workflow = OrderFulfillment(storage)

        def attempt(_):
            with ordering.domain_context():
                try:
                    workflow.add_order_item(order.id, product.id, 1)
                    return True
                except InsufficientStock:
                    return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(attempts)))

        assert results.count(True) == stock
        assert _product(storage, product.id).quantity == 0
        assert _order(storage, order.id).total == float(stock)
        assert len(_items(storage, order.id)) == stock
