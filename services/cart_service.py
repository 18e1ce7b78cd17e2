"""Shopping cart service"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Any
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.models import (
    Cart,
    CartItem,
    MAX_QUANTITY,
    MAX_TOTAL_AMOUNT,
    MAX_UNIT_PRICE,
    utcnow,
)
from repositories import CartRepository
from services.base import run_in_transaction
from services.catalog_service import CatalogService

logger = logging.getLogger("mealorder.cart")

CENT = Decimal("0.01")


class CartService:
    """Business logic for the per-user cart.

    Every mutation reloads the cart under a row lock, applies the change,
    recomputes ``total_amount`` from the lines and commits the whole cart in
    one transaction (see ``services.base.run_in_transaction``).
    """

    @staticmethod
    def validate_quantity(quantity: Any) -> int:
        """Quantities are positive integers; bools and fractional values are rejected."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ServiceValidationError(
                "Quantity must be a positive integer",
                details={"quantity": str(quantity)},
            )
        if quantity < 1 or quantity > MAX_QUANTITY:
            raise ServiceValidationError(
                f"Quantity must be between 1 and {MAX_QUANTITY}",
                details={"quantity": str(quantity)},
            )
        return quantity

    @staticmethod
    def validate_unit_price(unit_price: Any) -> Decimal:
        """Convert to a non-negative Decimal rounded to cents, at most MAX_UNIT_PRICE."""
        try:
            price = Decimal(str(unit_price))
        except (InvalidOperation, TypeError, ValueError):
            raise ServiceValidationError(
                "Price must be a number", details={"price": str(unit_price)}
            )
        if not price.is_finite() or price < 0:
            raise ServiceValidationError(
                "Price must be a non-negative number",
                details={"price": str(unit_price)},
            )
        # Bound check first: quantize raises past the decimal context precision
        if price > MAX_UNIT_PRICE:
            raise ServiceValidationError(
                f"Price must not exceed {MAX_UNIT_PRICE}",
                details={"price": str(unit_price)},
            )
        return price.quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def recalculate_total(cart: Cart) -> Decimal:
        """
        Recompute the cart total from scratch: sum of quantity x unit price.

        Raises:
            ServiceValidationError: If the total would exceed MAX_TOTAL_AMOUNT
        """
        total = sum(
            (Decimal(item.unit_price) * item.quantity for item in cart.items),
            Decimal("0"),
        ).quantize(CENT)
        if total > MAX_TOTAL_AMOUNT:
            raise ServiceValidationError(
                f"Cart total must not exceed {MAX_TOTAL_AMOUNT}",
                details={"total_amount": str(total)},
            )
        cart.total_amount = total
        # Touch the parent row so every mutation bumps the version column,
        # even when only line rows changed.
        cart.updated_at = utcnow()
        return cart.total_amount

    @staticmethod
    def find_item(cart: Cart, meal_id: UUID) -> Optional[CartItem]:
        for item in cart.items:
            if item.meal_id == meal_id:
                return item
        return None

    @staticmethod
    def get_cart(db: Session, user_id: UUID) -> Cart:
        """
        Get the caller's cart.

        Raises:
            NotFoundError: If the user has no cart
        """
        cart = CartRepository(db).get_by_user_id(user_id)
        if cart is None:
            raise NotFoundError("Cart not found", details={"user_id": str(user_id)})
        return cart

    @staticmethod
    def add_item(
        db: Session,
        user_id: UUID,
        meal_id: UUID,
        quantity: int,
        unit_price: Optional[Any] = None,
    ) -> Cart:
        """
        Add a meal to the user's cart.

        Creates the cart on first use. If the meal is already in the cart its
        quantity is increased and the price recorded for that line is kept;
        ``unit_price`` only applies to new lines. When ``unit_price`` is
        omitted, the current catalog price is snapshotted.

        Args:
            db: Database session
            user_id: Owner UUID
            meal_id: Catalog meal UUID
            quantity: Positive number of portions to add
            unit_price: Optional price to snapshot for a new line

        Returns:
            Cart: The updated cart

        Raises:
            ServiceValidationError: Bad quantity/price, unknown meal, or a
                merged quantity or total past the column limits
        """
        quantity = CartService.validate_quantity(quantity)
        meal = CatalogService.resolve_meal(db, meal_id)
        if not meal["exists"]:
            raise ServiceValidationError(
                f"Meal {meal_id} does not exist", details={"meal_id": str(meal_id)}
            )
        price = CartService.validate_unit_price(
            meal["unit_price"] if unit_price is None else unit_price
        )

        repo = CartRepository(db)

        def work() -> Cart:
            cart = repo.get_by_user_id(user_id, with_lock=True)
            if cart is None:
                cart = repo.create(user_id)
                logger.info(f"Creating cart for user {user_id}")

            existing = CartService.find_item(cart, meal_id)
            if existing:
                if existing.quantity + quantity > MAX_QUANTITY:
                    raise ServiceValidationError(
                        f"Quantity must be between 1 and {MAX_QUANTITY}",
                        details={
                            "meal_id": str(meal_id),
                            "quantity": str(existing.quantity + quantity),
                        },
                    )
                existing.quantity += quantity
                logger.info(
                    f"Merged meal {meal_id} into cart of {user_id}: "
                    f"quantity={existing.quantity}, kept price={existing.unit_price}"
                )
            else:
                position = max((i.position for i in cart.items), default=-1) + 1
                cart.items.append(
                    CartItem(
                        meal_id=meal_id,
                        quantity=quantity,
                        unit_price=price,
                        position=position,
                    )
                )
            CartService.recalculate_total(cart)
            return cart

        cart = run_in_transaction(db, work, action="add to cart")
        logger.info(f"Cart of {user_id} now totals {cart.total_amount}")
        return cart

    @staticmethod
    def update_item_quantity(
        db: Session, user_id: UUID, meal_id: UUID, quantity: int
    ) -> Cart:
        """
        Replace the quantity of an existing cart line.

        Raises:
            ServiceValidationError: If quantity is not a positive integer
            NotFoundError: If there is no cart or the meal is not in it
        """
        quantity = CartService.validate_quantity(quantity)
        repo = CartRepository(db)

        def work() -> Cart:
            cart = repo.get_by_user_id(user_id, with_lock=True)
            if cart is None:
                raise NotFoundError("Cart not found", details={"user_id": str(user_id)})
            item = CartService.find_item(cart, meal_id)
            if item is None:
                raise NotFoundError(
                    "Item not found in cart", details={"meal_id": str(meal_id)}
                )
            item.quantity = quantity
            CartService.recalculate_total(cart)
            return cart

        cart = run_in_transaction(db, work, action="update cart item")
        logger.info(f"Set quantity of {meal_id} to {quantity} in cart of {user_id}")
        return cart

    @staticmethod
    def remove_item(db: Session, user_id: UUID, meal_id: UUID) -> Cart:
        """
        Remove a meal from the cart. Removing a meal that is not in the cart
        is a no-op; the cart itself stays even when its last line goes.

        Raises:
            NotFoundError: If the user has no cart
        """
        repo = CartRepository(db)

        def work() -> Cart:
            cart = repo.get_by_user_id(user_id, with_lock=True)
            if cart is None:
                raise NotFoundError("Cart not found", details={"user_id": str(user_id)})
            item = CartService.find_item(cart, meal_id)
            if item is not None:
                cart.items.remove(item)
            CartService.recalculate_total(cart)
            return cart

        cart = run_in_transaction(db, work, action="remove cart item")
        logger.info(f"Removed meal {meal_id} from cart of {user_id}")
        return cart

    @staticmethod
    def clear_cart(db: Session, user_id: UUID) -> bool:
        """
        Delete the user's cart. Always succeeds.

        Returns:
            True if a cart was deleted, False if there was none
        """
        repo = CartRepository(db)
        cleared = run_in_transaction(
            db,
            lambda: repo.delete_by_user_id(user_id, with_lock=True),
            action="clear cart",
        )
        if cleared:
            logger.info(f"Cart cleared for user {user_id}")
        return cleared
