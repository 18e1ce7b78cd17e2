from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from domain.models.cart import MAX_QUANTITY, MAX_UNIT_PRICE


class AddCartItemRequest(BaseModel):
    """Schema for adding a meal to the caller's cart"""

    meal_id: UUID
    quantity: int = Field(
        ..., ge=1, le=MAX_QUANTITY, description="Number of portions to add"
    )
    price: Optional[Decimal] = Field(
        None,
        ge=0,
        le=MAX_UNIT_PRICE,
        description="Unit price to snapshot; defaults to the current catalog price",
    )


class UpdateCartItemRequest(BaseModel):
    """Schema for replacing the quantity of an existing cart line"""

    meal_id: UUID
    quantity: int = Field(
        ..., ge=1, le=MAX_QUANTITY, description="New quantity for the line"
    )


class MealSummary(BaseModel):
    """Catalog details attached to a line item for display"""

    meal_id: UUID
    meal_name: str
    img_url: Optional[str] = None
    category: Optional[str] = None
    calories: Optional[int] = None
    price: Decimal = Field(..., description="Current catalog price (display only)")

    model_config = {"from_attributes": True}


class CartItemResponse(BaseModel):
    """Single cart line"""

    meal_id: UUID
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    meal: Optional[MealSummary] = None


class CartResponse(BaseModel):
    """Schema for cart response"""

    user_id: UUID
    items: List[CartItemResponse]
    total_amount: Decimal
    item_count: int = Field(..., description="Sum of quantities over all lines")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartClearedResponse(BaseModel):
    """Acknowledgement for clearing a cart"""

    message: str = "Cart cleared successfully"
    cleared: bool = Field(..., description="False if there was no cart to clear")
