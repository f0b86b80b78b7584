"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a product "{name}" priced {price:f} with {quantity:d} in stock'),
    target_fixture="product",
)
def _(add_product, name, price, quantity):
    return add_product(name=name, price=price, quantity=quantity)


@given(parsers.cfparse("an empty order for user {user_id:d}"), target_fixture="order")
def _(add_order, user_id):
    return add_order(user_id=user_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the product has {quantity:d} in stock"))
def _(storage, product, quantity):
    assert storage.atomic(lambda stores: stores.products.get_by_id(product.id)).quantity == quantity


@then(parsers.cfparse("the order total is {total:f}"))
def _(storage, order, total):
    assert storage.atomic(lambda stores: stores.orders.get_by_id(order.id)).total == total


@then(parsers.cfparse("the order has {count:d} item(s)"))
def _(storage, order, count):
    assert len(storage.atomic(lambda stores: stores.orders.items_for(order.id))) == count
