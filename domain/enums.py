"""
Domain enums for the MealOrder application.
Contains all enumeration types used across the domain models.
"""

import enum


class OrderStatus(str, enum.Enum):
    """Order fulfilment lifecycle"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class PaymentStatus(str, enum.Enum):
    """Payment label recorded on an order (no payment workflow behind it)"""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class MealCategory(str, enum.Enum):
    """Catalog meal categories"""

    REGULAR_FOOD = "regular food"
    SEAFOOD = "seafood"
    SALAD = "salad"


# Allowed status edges. Terminal states have no outgoing edges; re-applying
# ``cancelled`` to a cancelled order is handled as a no-op by the order service.
ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return True if an order may move from ``current`` to ``target``."""
    return target in ORDER_STATUS_TRANSITIONS[current]
