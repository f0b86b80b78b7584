"""Order fulfillment workflow: adding a product to an order.

Adding an item touches three rows: the product's stock, a new line item and
the order's running total. All three writes happen in one storage
transaction, so a request either completes every step or leaves nothing
behind.

Steps, in order:
    1. Lock and read the product (not found → ObjectNotFoundError)
    2. Reserve stock on the product (short → InsufficientStock)
    3. Write the product back
    4. Record the line item at the product's current price
    5. Lock and read the order (not found → ObjectNotFoundError)
    6. Add ``quantity * price`` to the order total and write it back

The product lock is always taken before the order lock.
"""

import structlog
from protean.exceptions import ValidationError

from ordering.order.order import OrderItem
from ordering.store import get_storage
from ordering.store.port import Storage, Stores

logger = structlog.get_logger(__name__)


class OrderFulfillment:
    def __init__(self, storage: Storage | None = None) -> None:
        self.storage = storage or get_storage()

    def add_order_item(self, order_id: int, product_id: int, quantity: int) -> OrderItem:
        """Reserve ``quantity`` units of a product and record them on an order.

        Returns the recorded line item. Not idempotent: calling twice records
        two items and reserves twice.
        """
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        def work(stores: Stores) -> OrderItem:
            product = stores.products.get_by_id(product_id, for_update=True)
            product.reserve(quantity)
            stores.products.update(product_id, product)

            item = stores.orders.insert_item(
                order_id=order_id,
                product_id=product_id,
                quantity=quantity,
                price=product.price,
            )

            order = stores.orders.get_by_id(order_id, for_update=True)
            order.add_to_total(quantity, product.price)
            stores.orders.update(order_id, order)
            return item

        item = self.storage.atomic(work)
        logger.info(
            "order_item_added",
            order_id=order_id,
            product_id=product_id,
            quantity=quantity,
            item_id=item.id,
            price=item.price,
        )
        return item
