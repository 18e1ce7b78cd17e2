"""
Order domain mappers.
Handles transformation between ORM models and DTOs for order-related entities.
"""

from decimal import Decimal
from typing import Mapping, Optional
from uuid import UUID

from domain.mappers.cart_mapper import CartMapper
from domain.models import Order, Meal
from domain.schemas.order_schemas import OrderResponse, OrderItemResponse, ShippingAddress


class OrderMapper:
    """Mapper for order transformations."""

    @staticmethod
    def to_response(
        order: Order, meals: Optional[Mapping[UUID, Meal]] = None
    ) -> OrderResponse:
        """Convert ORM Order (items loaded) to OrderResponse DTO."""
        meals = meals or {}
        items = [
            OrderItemResponse(
                meal_id=item.meal_id,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
                line_total=Decimal(item.unit_price) * item.quantity,
                meal=CartMapper.meal_summary(meals.get(item.meal_id)),
            )
            for item in order.items
        ]

        return OrderResponse(
            order_id=order.order_id,
            user_id=order.user_id,
            items=items,
            total_amount=Decimal(order.total_amount),
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            shipping_address=ShippingAddress(**order.shipping_address),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
