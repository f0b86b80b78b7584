"""Order modification: commands and handler.

Only the user and status of an order are editable; the total is derived from
its line items. Deleting an order that already has line items is refused.
"""

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError
from protean.fields import Integer, String

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.store import get_storage

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrder:
    """Change the owner and/or status of an order."""

    order_id = Integer(required=True)
    user_id = Integer()
    status = String(max_length=20, choices=OrderStatus)


@ordering.command(part_of="Order")
class DeleteOrder:
    """Remove an order that has no line items."""

    order_id = Integer(required=True)


@ordering.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        def work(stores):
            order = stores.orders.get_by_id(command.order_id, for_update=True)
            order.update_details(user_id=command.user_id, status=command.status)
            stores.orders.update(command.order_id, order)

        get_storage().atomic(work)
        logger.info("order_updated", order_id=command.order_id)

    @handle(DeleteOrder)
    def delete_order(self, command):
        def work(stores):
            stores.orders.get_by_id(command.order_id, for_update=True)
            if stores.orders.items_for(command.order_id):
                raise InvalidOperationError({"_entity": [f"Order {command.order_id} has items and cannot be deleted"]})
            stores.orders.delete(command.order_id)

        get_storage().atomic(work)
        logger.info("order_deleted", order_id=command.order_id)
