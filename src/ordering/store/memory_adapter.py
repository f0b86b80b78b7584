"""In-memory storage for development and testing.

Tables are plain dicts of rows keyed by id. A single re-entrant lock is held
for the whole of ``atomic``, which makes every transaction serializable: two
reservations against the same product can never interleave. A snapshot taken
when the transaction starts is restored if ``work`` raises, so a failed
workflow leaves no partial writes behind.
"""

import copy
import threading
from datetime import UTC, datetime

from catalogue.product.product import Product
from protean.exceptions import ObjectNotFoundError

from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.store.port import OrderStore, ProductStore, Storage, Stores

_PRODUCT_FIELDS = ("name", "description", "price", "quantity", "category")
_ORDER_FIELDS = ("user_id", "total", "status")


def _filter_rows(table, fields, criteria):
    unknown = set(criteria) - {"id", "created_at", *fields}
    if unknown:
        raise ValueError(f"Unknown filter field: {', '.join(sorted(unknown))}")
    rows = sorted(table.values(), key=lambda row: row["id"])
    return [row for row in rows if all(row[field] == value for field, value in criteria.items())]


class MemoryStorage(Storage):
    """Dict-backed storage with serializable, all-or-nothing transactions."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tables: dict[str, dict[int, dict]] = {"products": {}, "orders": {}, "order_items": {}}
        self._sequences: dict[str, int] = {"products": 0, "orders": 0, "order_items": 0}
        self._stores = Stores(products=_MemoryProductStore(self), orders=_MemoryOrderStore(self))

    def atomic(self, work):
        with self._lock:
            snapshot = copy.deepcopy((self._tables, self._sequences))
            try:
                return work(self._stores)
            except BaseException:
                self._tables, self._sequences = snapshot
                raise

    def _table(self, name):
        return self._tables[name]

    def _next_id(self, name):
        self._sequences[name] += 1
        return self._sequences[name]


class _MemoryProductStore(ProductStore):
    def __init__(self, storage: MemoryStorage) -> None:
        self._storage = storage

    def get_by_id(self, product_id, *, for_update=False):
        row = self._storage._table("products").get(product_id)
        if row is None:
            raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"})
        return Product(**row)

    def update(self, product_id, product):
        table = self._storage._table("products")
        if product_id not in table:
            raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"})
        table[product_id].update({field: getattr(product, field) for field in _PRODUCT_FIELDS})

    def add(self, *, name, price, quantity=0, description=None, category=None):
        product_id = self._storage._next_id("products")
        row = {
            "id": product_id,
            "name": name,
            "description": description,
            "price": price,
            "quantity": quantity,
            "category": category,
            "created_at": datetime.now(UTC),
        }
        # Validate through the aggregate before the row becomes visible
        product = Product(**row)
        self._storage._table("products")[product_id] = row
        return product

    def filter(self, **criteria):
        rows = _filter_rows(self._storage._table("products"), _PRODUCT_FIELDS, criteria)
        return [Product(**row) for row in rows]


class _MemoryOrderStore(OrderStore):
    def __init__(self, storage: MemoryStorage) -> None:
        self._storage = storage

    def get_by_id(self, order_id, *, for_update=False):
        row = self._storage._table("orders").get(order_id)
        if row is None:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        return Order(**row)

    def update(self, order_id, order):
        table = self._storage._table("orders")
        if order_id not in table:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        table[order_id].update({field: getattr(order, field) for field in _ORDER_FIELDS})

    def add(self, *, user_id, status=OrderStatus.NEW.value):
        order_id = self._storage._next_id("orders")
        row = {
            "id": order_id,
            "user_id": user_id,
            "total": 0.0,
            "status": status,
            "created_at": datetime.now(UTC),
        }
        order = Order(**row)
        self._storage._table("orders")[order_id] = row
        return order

    def delete(self, order_id):
        table = self._storage._table("orders")
        if order_id not in table:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        del table[order_id]

    def filter(self, **criteria):
        rows = _filter_rows(self._storage._table("orders"), _ORDER_FIELDS, criteria)
        return [Order(**row) for row in rows]

    def insert_item(self, *, order_id, product_id, quantity, price):
        item_id = self._storage._next_id("order_items")
        row = {
            "id": item_id,
            "order_id": order_id,
            "product_id": product_id,
            "quantity": quantity,
            "price": price,
            "created_at": datetime.now(UTC),
        }
        item = OrderItem(**row)
        self._storage._table("order_items")[item_id] = row
        return item

    def items_for(self, order_id):
        rows = sorted(self._storage._table("order_items").values(), key=lambda row: row["id"])
        return [OrderItem(**row) for row in rows if row["order_id"] == order_id]
