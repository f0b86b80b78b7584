"""Order creation: command and handler."""

from protean import handle
from protean.fields import Integer, String

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.store import get_storage


@ordering.command(part_of="Order")
class CreateOrder:
    user_id = Integer(required=True)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.NEW.value)


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order = get_storage().atomic(
            lambda stores: stores.orders.add(
                user_id=command.user_id,
                status=command.status or OrderStatus.NEW.value,
            )
        )
        return order.id
