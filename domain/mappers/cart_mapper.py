"""
Cart domain mappers.
Handles transformation between ORM models and DTOs for cart-related entities.
"""

from decimal import Decimal
from typing import Mapping, Optional
from uuid import UUID

from domain.models import Cart, Meal
from domain.schemas.cart_schemas import CartResponse, CartItemResponse, MealSummary


class CartMapper:
    """Mapper for cart transformations."""

    @staticmethod
    def meal_summary(meal: Optional[Meal]) -> Optional[MealSummary]:
        if meal is None:
            return None
        return MealSummary.model_validate(meal)

    @staticmethod
    def to_response(
        cart: Cart, meals: Optional[Mapping[UUID, Meal]] = None
    ) -> CartResponse:
        """
        Convert ORM Cart to CartResponse DTO.

        Args:
            cart: Cart ORM instance with items loaded
            meals: optional catalog meals keyed by meal_id; lines are expanded
                with meal details when given

        Returns:
            CartResponse DTO with all cart data
        """
        meals = meals or {}
        items = [
            CartItemResponse(
                meal_id=item.meal_id,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
                line_total=Decimal(item.unit_price) * item.quantity,
                meal=CartMapper.meal_summary(meals.get(item.meal_id)),
            )
            for item in cart.items
        ]

        return CartResponse(
            user_id=cart.user_id,
            items=items,
            total_amount=Decimal(cart.total_amount),
            item_count=sum(item.quantity for item in cart.items),
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )
