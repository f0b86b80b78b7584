"""Store ports (abstract interfaces) for products, orders and line items.

The fulfillment workflow and the order commands only talk to these
contracts, so the same code runs against the in-memory adapter in tests and
the SQLAlchemy adapter in production.

All reads and writes happen inside ``Storage.atomic``: the adapter opens one
transaction, hands ``work`` a ``Stores`` bundle bound to it, commits when
``work`` returns and rolls everything back when it raises.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from catalogue.product.product import Product

from ordering.order.order import Order, OrderItem, OrderStatus

T = TypeVar("T")


class StoreFailure(Exception):
    """An underlying persistence error. Reported to callers as an internal error."""


class ProductStore(ABC):
    """Product inventory rows."""

    @abstractmethod
    def get_by_id(self, product_id: int, *, for_update: bool = False) -> Product:
        """Fetch a product, raising ObjectNotFoundError if absent.

        ``for_update`` holds a row lock until the surrounding transaction ends.
        """
        ...

    @abstractmethod
    def update(self, product_id: int, product: Product) -> None:
        """Replace every editable column of the product row."""
        ...

    @abstractmethod
    def add(
        self,
        *,
        name: str,
        price: float,
        quantity: int = 0,
        description: str | None = None,
        category: str | None = None,
    ) -> Product:
        """Insert a product row; id and created_at are assigned by the store."""
        ...

    @abstractmethod
    def filter(self, **criteria) -> list[Product]:
        """Products whose fields equal every given criterion, ordered by id."""
        ...


class OrderStore(ABC):
    """Order rows and their append-only line items."""

    @abstractmethod
    def get_by_id(self, order_id: int, *, for_update: bool = False) -> Order:
        """Fetch an order, raising ObjectNotFoundError if absent."""
        ...

    @abstractmethod
    def update(self, order_id: int, order: Order) -> None:
        """Replace user, total and status of the order row."""
        ...

    @abstractmethod
    def add(self, *, user_id: int, status: str = OrderStatus.NEW.value) -> Order:
        """Insert an empty order (total 0)."""
        ...

    @abstractmethod
    def delete(self, order_id: int) -> None: ...

    @abstractmethod
    def filter(self, **criteria) -> list[Order]:
        """Orders whose fields equal every given criterion, ordered by id."""
        ...

    @abstractmethod
    def insert_item(self, *, order_id: int, product_id: int, quantity: int, price: float) -> OrderItem:
        """Append a line item; id and created_at are assigned by the store."""
        ...

    @abstractmethod
    def items_for(self, order_id: int) -> list[OrderItem]: ...


@dataclass(frozen=True)
class Stores:
    """Stores bound to one open transaction."""

    products: ProductStore
    orders: OrderStore


class Storage(ABC):
    """Transaction boundary over the product and order stores."""

    @abstractmethod
    def atomic(self, work: Callable[[Stores], T]) -> T:
        """Run ``work`` in a single transaction and return its result."""
        ...
