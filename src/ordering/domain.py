"""Ordering bounded context: orders, line items and the fulfillment workflow.

Orders are created empty and grow one line item at a time. Adding a line item
reserves product inventory and updates the order's running total in a single
store transaction.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_file_prefix="orders")

logger = get_logger(__name__)

# Domain Composition Root
ordering = Domain(name="ordering")
