"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.cart_schemas import (
    AddCartItemRequest,
    UpdateCartItemRequest,
    MealSummary,
    CartItemResponse,
    CartResponse,
    CartClearedResponse,
)
from domain.schemas.order_schemas import (
    ShippingAddress,
    CreateOrderRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    OrderItemResponse,
    OrderResponse,
)

__all__ = [
    # Cart schemas
    "AddCartItemRequest",
    "UpdateCartItemRequest",
    "MealSummary",
    "CartItemResponse",
    "CartResponse",
    "CartClearedResponse",
    # Order schemas
    "ShippingAddress",
    "CreateOrderRequest",
    "UpdateOrderStatusRequest",
    "UpdatePaymentStatusRequest",
    "OrderItemResponse",
    "OrderResponse",
]
