"""API routes package"""

from . import cart, orders, health

__all__ = ["cart", "orders", "health"]
