"""Application tests for order commands via domain.process()."""

import pytest
from ordering.order.creation import CreateOrder
from ordering.order.items import AddOrderItem
from ordering.order.modification import DeleteOrder, UpdateOrder
from ordering.order.queries import get_order, list_orders, search_orders
from protean import current_domain
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


def _create_order(**overrides):
    defaults = {"user_id": 1}
    defaults.update(overrides)
    return current_domain.process(CreateOrder(**defaults), asynchronous=False)


class TestCreateOrder:
    def test_returns_new_id(self):
        order_id = _create_order()
        order, items = get_order(order_id)
        assert order.user_id == 1
        assert order.total == 0.0
        assert order.status == "new"
        assert items == []

    def test_ids_are_sequential(self):
        first = _create_order()
        second = _create_order()
        assert second == first + 1

    def test_explicit_status(self):
        order_id = _create_order(status="in_process")
        order, _ = get_order(order_id)
        assert order.status == "in_process"

    def test_user_is_required(self):
        with pytest.raises(ValidationError):
            CreateOrder()

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrder(user_id=1, status="lost")


class TestUpdateOrder:
    def test_updates_status_and_user(self):
        order_id = _create_order()
        current_domain.process(UpdateOrder(order_id=order_id, user_id=5, status="done"), asynchronous=False)
        order, _ = get_order(order_id)
        assert order.user_id == 5
        assert order.status == "done"

    def test_total_is_kept(self, add_product):
        product = add_product(price=4.0, quantity=10)
        order_id = _create_order()
        current_domain.process(
            AddOrderItem(order_id=order_id, product_id=product.id, quantity=2),
            asynchronous=False,
        )
        current_domain.process(UpdateOrder(order_id=order_id, status="in_process"), asynchronous=False)
        order, _ = get_order(order_id)
        assert order.total == 8.0

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateOrder(order_id=404, status="done"), asynchronous=False)


class TestDeleteOrder:
    def test_deletes_empty_order(self):
        order_id = _create_order()
        current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            get_order(order_id)

    def test_order_with_items_cannot_be_deleted(self, add_product):
        product = add_product()
        order_id = _create_order()
        current_domain.process(
            AddOrderItem(order_id=order_id, product_id=product.id, quantity=1),
            asynchronous=False,
        )

        with pytest.raises(InvalidOperationError):
            current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)

        order, items = get_order(order_id)
        assert len(items) == 1

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteOrder(order_id=404), asynchronous=False)


class TestAddOrderItemCommand:
    def test_returns_item_id(self, add_product):
        product = add_product(price=10.0, quantity=5)
        order_id = _create_order()

        item_id = current_domain.process(
            AddOrderItem(order_id=order_id, product_id=product.id, quantity=3),
            asynchronous=False,
        )

        order, items = get_order(order_id)
        assert [item.id for item in items] == [item_id]
        assert order.total == 30.0

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            AddOrderItem(order_id=1, product_id=1, quantity=0)
        assert "quantity" in exc.value.messages

    def test_missing_product_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            AddOrderItem(order_id=1, quantity=1)
        assert "product_id" in exc.value.messages


class TestOrderQueries:
    def test_list_orders_in_id_order(self):
        ids = [_create_order(user_id=user) for user in (3, 1, 2)]
        assert [order.id for order in list_orders()] == ids

    def test_search_by_status(self):
        _create_order(status="new")
        done_id = _create_order(status="done")
        assert [order.id for order in search_orders(status="done")] == [done_id]

    def test_search_by_user(self):
        _create_order(user_id=1)
        mine = _create_order(user_id=2)
        assert [order.id for order in search_orders(user_id=2)] == [mine]

    def test_status_takes_precedence_over_user(self):
        new_for_other_user = _create_order(user_id=1, status="new")
        _create_order(user_id=2, status="done")
        assert [order.id for order in search_orders(status="new", user_id=2)] == [new_for_other_user]

    def test_search_needs_a_criterion(self):
        with pytest.raises(ValidationError):
            search_orders()

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            get_order(404)
