"""Checkout: turn the caller's cart into an order"""

import logging
from typing import Any, Dict
from uuid import UUID
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.exceptions import EmptyCartError, ServiceValidationError
from domain.enums import OrderStatus, PaymentStatus
from domain.models import Order, OrderItem, utcnow
from domain.schemas.order_schemas import ShippingAddress
from repositories import CartRepository, OrderRepository
from services.base import STALE_WRITE_ERRORS, run_in_transaction

logger = logging.getLogger("mealorder.checkout")


class CheckoutService:
    """Business logic for checkout."""

    @staticmethod
    def validate_shipping_address(shipping_address: Any) -> Dict[str, str]:
        """
        Validate a shipping address (ShippingAddress or plain mapping).

        Returns:
            Dict with street, city, state, zip_code and country, whitespace stripped

        Raises:
            ServiceValidationError: If any field is missing or blank
        """
        try:
            address = ShippingAddress.model_validate(shipping_address)
        except ValidationError as e:
            fields = sorted(
                {".".join(str(p) for p in err["loc"]) or "shipping_address" for err in e.errors()}
            )
            raise ServiceValidationError(
                "Shipping address requires non-empty street, city, state, zip_code and country",
                details={"fields": fields},
            )
        return address.model_dump()

    @staticmethod
    def validate_payment_method(payment_method: Any) -> str:
        if not isinstance(payment_method, str) or not payment_method.strip():
            raise ServiceValidationError(
                "Payment method is required", details={"fields": ["payment_method"]}
            )
        return payment_method.strip()

    @staticmethod
    def create_order(
        db: Session,
        user_id: UUID,
        shipping_address: Any,
        payment_method: str,
    ) -> Order:
        """
        Create an order from the user's cart and delete the cart.

        Algorithm:
        1. Lock and load the cart; fail with EmptyCartError if there is nothing to order
        2. Validate shipping address and payment method
        3. Copy cart lines and total verbatim into a pending order
        4. Insert the order and delete the cart in the same transaction

        Because step 4 commits once, either both the order exists and the
        cart is gone, or neither happened and the cart is left for a retry.
        A resubmitted checkout after a successful one finds no cart and gets
        EmptyCartError instead of a second order.

        Args:
            db: Database session
            user_id: Owner UUID
            shipping_address: ShippingAddress or mapping with the five address fields
            payment_method: Opaque, non-empty payment method label

        Returns:
            Order: The created order

        Raises:
            EmptyCartError: If the user has no cart or the cart has no items
            ServiceValidationError: If address or payment method is invalid
            StorageUnavailableError: If the database could not be reached
        """
        cart_repo = CartRepository(db)
        order_repo = OrderRepository(db)

        def work() -> Order:
            cart = cart_repo.get_by_user_id(user_id, with_lock=True)
            if cart is None or not cart.items:
                raise EmptyCartError(details={"user_id": str(user_id)})

            address = CheckoutService.validate_shipping_address(shipping_address)
            method = CheckoutService.validate_payment_method(payment_method)

            now = utcnow()
            order = Order(
                user_id=user_id,
                total_amount=cart.total_amount,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                payment_method=method,
                created_at=now,
                updated_at=now,
                items=[
                    OrderItem(
                        meal_id=item.meal_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        position=index,
                    )
                    for index, item in enumerate(cart.items)
                ],
                **address,
            )
            order_repo.add(order)
            cart_repo.delete(cart)
            return order

        logger.info(f"Checking out cart of user {user_id}")
        order = run_in_transaction(
            db, work, action="checkout", retry_on=STALE_WRITE_ERRORS
        )
        logger.info(
            f"Order created: order_id={order.order_id}, user={user_id}, "
            f"items={len(order.items)}, total={order.total_amount}"
        )
        return order
