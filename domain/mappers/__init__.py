"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.cart_mapper import CartMapper
from domain.mappers.order_mapper import OrderMapper

__all__ = ["CartMapper", "OrderMapper"]
