from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from domain.enums import OrderStatus, PaymentStatus
from domain.schemas.cart_schemas import MealSummary


class ShippingAddress(BaseModel):
    """Delivery address; every field is required and must not be blank"""

    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}


class CreateOrderRequest(BaseModel):
    """Schema for checking out the caller's cart"""

    shipping_address: ShippingAddress
    payment_method: str = Field(
        ..., min_length=1, description="Opaque payment method label, e.g. 'card'"
    )

    model_config = {"str_strip_whitespace": True}


class UpdateOrderStatusRequest(BaseModel):
    """Schema for moving an order to another status"""

    status: OrderStatus


class UpdatePaymentStatusRequest(BaseModel):
    """Schema for recording the payment label of an order"""

    payment_status: PaymentStatus


class OrderItemResponse(BaseModel):
    """Frozen order line"""

    meal_id: UUID
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    meal: Optional[MealSummary] = None


class OrderResponse(BaseModel):
    """Schema for order response"""

    order_id: UUID
    user_id: UUID
    items: List[OrderItemResponse]
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: str
    shipping_address: ShippingAddress
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
