"""Read-side helpers for orders.

Reads go straight to storage rather than through commands. Each call runs in
its own short transaction so an order and its items are read consistently.
"""

from protean.exceptions import ValidationError

from ordering.store import get_storage


def get_order(order_id):
    """Return ``(order, items)`` for one order."""
    return get_storage().atomic(lambda stores: (stores.orders.get_by_id(order_id), stores.orders.items_for(order_id)))


def list_orders():
    return get_storage().atomic(lambda stores: stores.orders.filter())


def search_orders(status=None, user_id=None):
    """Orders matching a status or a user.

    When both are given, status wins and the user is ignored.
    """
    if status:
        criteria = {"status": status}
    elif user_id is not None:
        criteria = {"user_id": user_id}
    else:
        raise ValidationError({"_query": ["Provide either a status or a user to search by"]})
    return get_storage().atomic(lambda stores: stores.orders.filter(**criteria))
