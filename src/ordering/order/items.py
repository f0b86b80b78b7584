"""Adding a product to an order: command and handler."""

from protean import handle
from protean.fields import Integer

from ordering.domain import ordering
from ordering.fulfillment.workflow import OrderFulfillment
from ordering.order.order import OrderItem


@ordering.command(part_of="OrderItem")
class AddOrderItem:
    order_id = Integer(required=True)
    product_id = Integer(required=True, min_value=1)
    quantity = Integer(required=True, min_value=1)


@ordering.command_handler(part_of=OrderItem)
class AddOrderItemHandler:
    @handle(AddOrderItem)
    def add_order_item(self, command):
        item = OrderFulfillment().add_order_item(
            order_id=command.order_id,
            product_id=command.product_id,
            quantity=command.quantity,
        )
        return item.id
