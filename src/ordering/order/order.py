"""Order aggregate and the line items recorded against it.

An order starts empty (total 0, status ``new``) and grows one line item at a
time. Each line item keeps the unit price the product had when it was added,
so an order's value never drifts when catalogue prices change later.

Line items are appended as their own rows and reference the order and the
product by id only, which is why OrderItem is modeled as a separate aggregate
rather than a child collection of Order.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from ordering.domain import ordering


class OrderStatus(Enum):
    NEW = "new"
    IN_PROCESS = "in_process"
    DONE = "done"


@ordering.aggregate
class Order:
    id = Integer(identifier=True)
    user_id = Integer(required=True)
    total = Float(default=0.0)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.NEW.value,
    )
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @invariant.post
    def total_cannot_be_negative(self):
        if self.total is not None and self.total < 0:
            raise ValidationError({"total": ["Order total cannot be negative"]})

    def add_to_total(self, quantity, unit_price):
        """Account for a newly recorded line item in the running total."""
        self.total = (self.total or 0.0) + quantity * unit_price

    def update_details(self, user_id=None, status=None):
        """Apply the client-editable fields that were provided.

        ``total`` is derived from line items and is not editable here.
        """
        if user_id is not None:
            self.user_id = user_id
        if status is not None:
            self.status = status


@ordering.aggregate
class OrderItem:
    """A single product-quantity entry belonging to one order.

    Recorded once when the item is added and never updated afterwards.
    """

    id = Integer(identifier=True)
    order_id = Integer(required=True)
    product_id = Integer(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @property
    def subtotal(self):
        return self.quantity * self.price
