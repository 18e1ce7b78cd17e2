"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.meal_repository import MealRepository
from repositories.cart_repository import CartRepository
from repositories.order_repository import OrderRepository

__all__ = [
    "BaseRepository",
    "MealRepository",
    "CartRepository",
    "OrderRepository",
]
