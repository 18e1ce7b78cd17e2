"""
Services package - Business logic layer.
"""

from services.catalog_service import CatalogService
from services.cart_service import CartService
from services.checkout_service import CheckoutService
from services.order_service import OrderService

__all__ = [
    "CatalogService",
    "CartService",
    "CheckoutService",
    "OrderService",
]
