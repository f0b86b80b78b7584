"""SQLAlchemy Core storage for PostgreSQL.

Each ``atomic`` call runs in one ``engine.begin()`` block. Rows read with
``for_update=True`` are fetched with ``SELECT ... FOR UPDATE`` so concurrent
reservations against the same product queue up behind each other instead of
overselling.

When PostgreSQL aborts a transaction because of a serialization failure or a
deadlock, the whole unit of work is retried a bounded number of times with a
linear backoff. Any other database error is reported as ``StoreFailure``.
"""

import time

import structlog
from catalogue.product.product import Product
from protean.exceptions import ObjectNotFoundError
from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.store import tables
from ordering.store.port import OrderStore, ProductStore, Storage, StoreFailure, Stores

logger = structlog.get_logger(__name__)

# PostgreSQL serialization_failure and deadlock_detected
RETRYABLE_PGCODES = {"40001", "40P01"}

_PRODUCT_COLUMNS = {name: name for name in ("id", "name", "description", "price", "category", "quantity", "created_at")}
_ORDER_COLUMNS = {"id": "id", "user_id": "userid", "total": "total", "status": "status", "created_at": "created_at"}


def _pgcode(exc):
    return getattr(getattr(exc, "orig", None), "pgcode", None)


def is_retryable(exc: Exception) -> bool:
    return isinstance(exc, DBAPIError) and _pgcode(exc) in RETRYABLE_PGCODES


def _product_from_row(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        quantity=row.quantity,
        category=row.category,
        created_at=row.created_at,
    )


def _order_from_row(row) -> Order:
    return Order(id=row.id, user_id=row.userid, total=row.total, status=row.status, created_at=row.created_at)


def _item_from_row(row) -> OrderItem:
    return OrderItem(
        id=row.id,
        order_id=row.orderid,
        product_id=row.productid,
        quantity=row.quantity,
        price=row.price,
        created_at=row.created_at,
    )


def _where(table, columns, criteria):
    clauses = []
    for field, value in criteria.items():
        column = columns.get(field)
        if column is None:
            raise ValueError(f"Unknown filter field: {field}")
        clauses.append(table.c[column] == value)
    return clauses


class SqlStorage(Storage):
    def __init__(self, engine, max_attempts: int = 3, backoff: float = 0.05) -> None:
        self.engine = engine
        self.max_attempts = max_attempts
        self.backoff = backoff

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "SqlStorage":
        return cls(create_engine(url, pool_pre_ping=True), **kwargs)

    def atomic(self, work):
        attempt = 0
        while True:
            attempt += 1
            try:
                with self.engine.begin() as connection:
                    stores = Stores(
                        products=_SqlProductStore(connection),
                        orders=_SqlOrderStore(connection),
                    )
                    return work(stores)
            except DBAPIError as exc:
                if is_retryable(exc) and attempt < self.max_attempts:
                    logger.warning("transaction_retry", attempt=attempt, pgcode=_pgcode(exc))
                    time.sleep(self.backoff * attempt)
                    continue
                logger.error("transaction_failed", attempt=attempt, error=str(exc))
                raise StoreFailure(str(exc)) from exc
            except SQLAlchemyError as exc:
                logger.error("transaction_failed", attempt=attempt, error=str(exc))
                raise StoreFailure(str(exc)) from exc


class _SqlProductStore(ProductStore):
    def __init__(self, connection) -> None:
        self.connection = connection

    def get_by_id(self, product_id, *, for_update=False):
        query = select(tables.products).where(tables.products.c.id == product_id)
        if for_update:
            query = query.with_for_update()
        row = self.connection.execute(query).first()
        if row is None:
            raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"})
        return _product_from_row(row)

    def update(self, product_id, product):
        result = self.connection.execute(
            update(tables.products)
            .where(tables.products.c.id == product_id)
            .values(
                name=product.name,
                description=product.description,
                price=product.price,
                category=product.category,
                quantity=product.quantity,
            )
        )
        if result.rowcount == 0:
            raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"})

    def add(self, *, name, price, quantity=0, description=None, category=None):
        # Validate before touching the table
        Product(id=0, name=name, price=price, quantity=quantity, description=description, category=category)
        result = self.connection.execute(
            insert(tables.products).values(
                name=name, price=price, quantity=quantity, description=description, category=category
            )
        )
        return self.get_by_id(result.inserted_primary_key[0])

    def filter(self, **criteria):
        query = (
            select(tables.products)
            .where(*_where(tables.products, _PRODUCT_COLUMNS, criteria))
            .order_by(tables.products.c.id)
        )
        return [_product_from_row(row) for row in self.connection.execute(query)]


class _SqlOrderStore(OrderStore):
    def __init__(self, connection) -> None:
        self.connection = connection

    def get_by_id(self, order_id, *, for_update=False):
        query = select(tables.orders).where(tables.orders.c.id == order_id)
        if for_update:
            query = query.with_for_update()
        row = self.connection.execute(query).first()
        if row is None:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        return _order_from_row(row)

    def update(self, order_id, order):
        result = self.connection.execute(
            update(tables.orders)
            .where(tables.orders.c.id == order_id)
            .values(userid=order.user_id, total=order.total, status=order.status)
        )
        if result.rowcount == 0:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})

    def add(self, *, user_id, status=OrderStatus.NEW.value):
        Order(id=0, user_id=user_id, status=status)
        result = self.connection.execute(insert(tables.orders).values(userid=user_id, total=0.0, status=status))
        return self.get_by_id(result.inserted_primary_key[0])

    def delete(self, order_id):
        result = self.connection.execute(delete(tables.orders).where(tables.orders.c.id == order_id))
        if result.rowcount == 0:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})

    def filter(self, **criteria):
        query = (
            select(tables.orders).where(*_where(tables.orders, _ORDER_COLUMNS, criteria)).order_by(tables.orders.c.id)
        )
        return [_order_from_row(row) for row in self.connection.execute(query)]

    def insert_item(self, *, order_id, product_id, quantity, price):
        OrderItem(id=0, order_id=order_id, product_id=product_id, quantity=quantity, price=price)
        result = self.connection.execute(
            insert(tables.order_items).values(orderid=order_id, productid=product_id, quantity=quantity, price=price)
        )
        row = self.connection.execute(
            select(tables.order_items).where(tables.order_items.c.id == result.inserted_primary_key[0])
        ).one()
        return _item_from_row(row)

    def items_for(self, order_id):
        query = (
            select(tables.order_items)
            .where(tables.order_items.c.orderid == order_id)
            .order_by(tables.order_items.c.id)
        )
        return [_item_from_row(row) for row in self.connection.execute(query)]
