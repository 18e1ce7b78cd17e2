"""Order routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_current_user_id
from domain.mappers import OrderMapper
from domain.schemas.order_schemas import (
    CreateOrderRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    OrderResponse,
)
from services import CheckoutService, OrderService, CatalogService

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger("mealorder.api.orders")


@router.post("/create", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: CreateOrderRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Check out the caller's cart.

    The order copies the cart's lines and total, starts as ``pending`` with
    payment ``pending``, and the cart is deleted in the same transaction.

    Example request:
    ```json
    {
        "shipping_address": {
            "street": "12 Market St",
            "city": "Springfield",
            "state": "IL",
            "zip_code": "62701",
            "country": "US"
        },
        "payment_method": "card"
    }
    ```
    """
    order = CheckoutService.create_order(
        db, user_id, payload.shipping_address, payload.payment_method
    )
    logger.info("Checkout by user %s created order %s", user_id, order.order_id)
    return OrderMapper.to_response(order)


@router.get("", response_model=List[OrderResponse])
def get_orders(
    user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    """List the caller's orders, newest first"""
    orders = OrderService.get_orders(db, user_id)
    logger.info("Found %d orders for user %s", len(orders), user_id)
    meals = CatalogService.meals_for(db, [i for o in orders for i in o.items])
    return [OrderMapper.to_response(o, meals) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get one of the caller's orders"""
    order = OrderService.get_order_by_id(db, user_id, order_id)
    return OrderMapper.to_response(order, CatalogService.meals_for(db, order.items))


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: UUID,
    payload: UpdateOrderStatusRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Move an order along its lifecycle.

    Allowed: pending -> processing -> completed, pending|processing -> cancelled.
    Anything else returns 409.
    """
    order = OrderService.update_status(db, user_id, order_id, payload.status)
    return OrderMapper.to_response(order)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Cancel an order; completed orders cannot be cancelled"""
    order = OrderService.cancel_order(db, user_id, order_id)
    return OrderMapper.to_response(order)


@router.put("/{order_id}/payment-status", response_model=OrderResponse)
def update_payment_status(
    order_id: UUID,
    payload: UpdatePaymentStatusRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record the payment label of an order (pending, paid or failed)"""
    order = OrderService.update_payment_status(
        db, user_id, order_id, payload.payment_status
    )
    return OrderMapper.to_response(order)
