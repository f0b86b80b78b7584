"""Product aggregate root with its stock reservation behavior."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from catalogue.domain import catalogue


class InsufficientStock(ValidationError):
    """Raised when a reservation asks for more units than a product has on hand."""

    def __init__(self, product_name, available, requested):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__({"quantity": [f"product {product_name} is not available in quantity requested"]})


@catalogue.aggregate
class Product:
    """A sellable product and the number of units currently in stock.

    ``quantity`` never drops below zero: the field rejects negative values and
    ``reserve`` refuses to hand out more units than are on hand.
    """

    id: Integer(identifier=True)
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    quantity: Integer(default=0, min_value=0)
    category: String(max_length=255)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    def reserve(self, quantity):
        """Take ``quantity`` units out of stock for an order line."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        if not self.has_stock_for(quantity):
            raise InsufficientStock(self.name, self.quantity, quantity)

        self.quantity = self.quantity - quantity

    def has_stock_for(self, quantity):
        """True when at least ``quantity`` units are on hand."""
        return self.quantity >= quantity
