"""Order queries and status transitions"""

import logging
from typing import Any, List
from uuid import UUID
from sqlalchemy.orm import Session

from app.exceptions import InvalidTransitionError, NotFoundError, ServiceValidationError
from domain.enums import OrderStatus, PaymentStatus, can_transition
from domain.models import Order
from repositories import OrderRepository
from services.base import STALE_WRITE_ERRORS, run_in_transaction

logger = logging.getLogger("mealorder.orders")


class OrderService:
    """Business logic for placed orders.

    Status lifecycle::

        pending -> processing -> completed
        pending | processing -> cancelled

    ``completed`` and ``cancelled`` are terminal. Cancelling an already
    cancelled order is accepted as a no-op.
    """

    @staticmethod
    def _parse_status(value: Any) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError:
            raise ServiceValidationError(
                f"Unknown order status: {value}",
                details={"allowed": [s.value for s in OrderStatus]},
            )

    @staticmethod
    def _parse_payment_status(value: Any) -> PaymentStatus:
        try:
            return PaymentStatus(value)
        except ValueError:
            raise ServiceValidationError(
                f"Unknown payment status: {value}",
                details={"allowed": [s.value for s in PaymentStatus]},
            )

    @staticmethod
    def _load_owned(
        repo: OrderRepository, user_id: UUID, order_id: UUID, with_lock: bool = False
    ) -> Order:
        # Orders of other users are reported exactly like missing ones.
        order = repo.get_by_id_and_user(order_id, user_id, with_lock=with_lock)
        if order is None:
            raise NotFoundError("Order not found", details={"order_id": str(order_id)})
        return order

    @staticmethod
    def get_orders(db: Session, user_id: UUID) -> List[Order]:
        """Get all orders for a user (newest first)"""
        return OrderRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_order_by_id(db: Session, user_id: UUID, order_id: UUID) -> Order:
        """
        Get a single order owned by the user.

        Raises:
            NotFoundError: If the order does not exist or belongs to someone else
        """
        return OrderService._load_owned(OrderRepository(db), user_id, order_id)

    @staticmethod
    def update_status(
        db: Session, user_id: UUID, order_id: UUID, new_status: Any
    ) -> Order:
        """
        Move an order to ``new_status`` if the lifecycle allows it.

        Raises:
            ServiceValidationError: If ``new_status`` is not a known status
            NotFoundError: If the order does not exist or belongs to someone else
            InvalidTransitionError: If the edge is not allowed
        """
        target = OrderService._parse_status(new_status)
        repo = OrderRepository(db)

        def work() -> Order:
            order = OrderService._load_owned(repo, user_id, order_id, with_lock=True)
            current = OrderStatus(order.status)

            if current == OrderStatus.CANCELLED and target == OrderStatus.CANCELLED:
                return order
            if not can_transition(current, target):
                raise InvalidTransitionError(
                    f"Cannot change order status from {current.value} to {target.value}",
                    details={
                        "order_id": str(order_id),
                        "from": current.value,
                        "to": target.value,
                    },
                )
            order.status = target.value
            return order

        order = run_in_transaction(
            db, work, action="update order status", retry_on=STALE_WRITE_ERRORS
        )
        logger.info(f"Order {order_id} status is now {order.status}")
        return order

    @staticmethod
    def cancel_order(db: Session, user_id: UUID, order_id: UUID) -> Order:
        """
        Cancel an order. Completed orders cannot be cancelled; cancelling a
        cancelled order succeeds without changes.

        Raises:
            NotFoundError: If the order does not exist or belongs to someone else
            InvalidTransitionError: If the order is completed
        """
        try:
            return OrderService.update_status(
                db, user_id, order_id, OrderStatus.CANCELLED
            )
        except InvalidTransitionError as e:
            raise InvalidTransitionError("Cannot cancel completed order", details=e.details)

    @staticmethod
    def update_payment_status(
        db: Session, user_id: UUID, order_id: UUID, payment_status: Any
    ) -> Order:
        """
        Record the payment label of an order. This is bookkeeping only; no
        payment is processed.

        Raises:
            ServiceValidationError: If ``payment_status`` is not a known value
            NotFoundError: If the order does not exist or belongs to someone else
            InvalidTransitionError: If the order has been cancelled
        """
        target = OrderService._parse_payment_status(payment_status)
        repo = OrderRepository(db)

        def work() -> Order:
            order = OrderService._load_owned(repo, user_id, order_id, with_lock=True)
            if order.status == OrderStatus.CANCELLED.value:
                raise InvalidTransitionError(
                    "Cannot change payment status of a cancelled order",
                    details={"order_id": str(order_id)},
                )
            order.payment_status = target.value
            return order

        order = run_in_transaction(
            db, work, action="update payment status", retry_on=STALE_WRITE_ERRORS
        )
        logger.info(f"Order {order_id} payment status is now {order.payment_status}")
        return order
