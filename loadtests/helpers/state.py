"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state: no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks state for a single simulated order."""

    order_id: int | None = None
    item_ids: list[int] = field(default_factory=list)
    stock_refusals: int = 0
