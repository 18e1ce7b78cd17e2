"""Shopping cart routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_db, get_current_user_id
from domain.mappers import CartMapper
from domain.schemas.cart_schemas import (
    AddCartItemRequest,
    UpdateCartItemRequest,
    CartResponse,
    CartClearedResponse,
)
from services import CartService, CatalogService

router = APIRouter(prefix="/cart", tags=["Cart"])
logger = logging.getLogger("mealorder.api.cart")


@router.post("/add", response_model=CartResponse)
def add_to_cart(
    payload: AddCartItemRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Add a meal to the caller's cart.

    If the meal is already in the cart its quantity is increased; the price
    stored for that line is kept. ``price`` is optional and defaults to the
    current catalog price.
    """
    cart = CartService.add_item(
        db, user_id, payload.meal_id, payload.quantity, payload.price
    )
    return CartMapper.to_response(cart)


@router.get("", response_model=CartResponse)
def get_cart(
    user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    """Get the caller's cart with meal details expanded from the catalog"""
    cart = CartService.get_cart(db, user_id)
    logger.info("Cart of user %s has %d lines", user_id, len(cart.items))
    return CartMapper.to_response(cart, CatalogService.meals_for(db, cart.items))


@router.put("/update", response_model=CartResponse)
def update_cart_item(
    payload: UpdateCartItemRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Replace the quantity of a meal already in the cart"""
    cart = CartService.update_item_quantity(
        db, user_id, payload.meal_id, payload.quantity
    )
    return CartMapper.to_response(cart)


@router.delete("/remove/{meal_id}", response_model=CartResponse)
def remove_from_cart(
    meal_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Remove a meal from the cart (no-op if the meal is not in it)"""
    cart = CartService.remove_item(db, user_id, meal_id)
    return CartMapper.to_response(cart)


@router.delete("/clear", response_model=CartClearedResponse)
def clear_cart(
    user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    """Delete the caller's cart. Succeeds whether or not a cart existed."""
    cleared = CartService.clear_cart(db, user_id)
    logger.info("Clear cart for user %s: cleared=%s", user_id, cleared)
    return CartClearedResponse(cleared=cleared)
