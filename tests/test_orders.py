"""
Tests for order queries and the status lifecycle.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.exceptions import InvalidTransitionError, NotFoundError, ServiceValidationError
from domain.enums import ORDER_STATUS_TRANSITIONS, OrderStatus, can_transition
from services.cart_service import CartService
from services.checkout_service import CheckoutService
from services.order_service import OrderService
from test_fixtures import SHIPPING_ADDRESS, PAYMENT_METHOD


def _place_order(db: Session, user_id, meal, quantity=1):
    CartService.add_item(db, user_id, meal.meal_id, quantity)
    return CheckoutService.create_order(db, user_id, SHIPPING_ADDRESS, PAYMENT_METHOD)


def _order_in_status(db: Session, user_id, meal, status: OrderStatus):
    order = _place_order(db, user_id, meal)
    path = {
        OrderStatus.PENDING: [],
        OrderStatus.PROCESSING: ["processing"],
        OrderStatus.COMPLETED: ["processing", "completed"],
        OrderStatus.CANCELLED: ["cancelled"],
    }[status]
    for step in path:
        order = OrderService.update_status(db, user_id, order.order_id, step)
    return order


# =============================================================================
# QUERIES
# =============================================================================


def test_get_orders_newest_first(db_session: Session, meals):
    user_id = uuid.uuid4()
    first = _place_order(db_session, user_id, meals[0])
    second = _place_order(db_session, user_id, meals[1])

    orders = OrderService.get_orders(db_session, user_id)

    assert [o.order_id for o in orders] == [second.order_id, first.order_id]


def test_get_orders_empty_for_new_user(db_session: Session):
    assert OrderService.get_orders(db_session, uuid.uuid4()) == []


def test_get_order_by_id(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0], quantity=3)

    found = OrderService.get_order_by_id(db_session, user_id, order.order_id)

    assert found.order_id == order.order_id
    assert found.items[0].quantity == 3


def test_orders_of_other_users_are_not_found(db_session: Session, meals):
    owner, stranger = uuid.uuid4(), uuid.uuid4()
    order = _place_order(db_session, owner, meals[0])

    with pytest.raises(NotFoundError):
        OrderService.get_order_by_id(db_session, stranger, order.order_id)
    with pytest.raises(NotFoundError):
        OrderService.update_status(db_session, stranger, order.order_id, "processing")
    with pytest.raises(NotFoundError):
        OrderService.cancel_order(db_session, stranger, order.order_id)

    assert OrderService.get_orders(db_session, stranger) == []
    assert OrderService.get_order_by_id(db_session, owner, order.order_id).status == "pending"


def test_unknown_order_id_is_not_found(db_session: Session):
    with pytest.raises(NotFoundError) as exc_info:
        OrderService.get_order_by_id(db_session, uuid.uuid4(), uuid.uuid4())

    assert str(exc_info.value) == "Order not found"


# =============================================================================
# STATUS TRANSITIONS
# =============================================================================


def test_transition_table():
    assert can_transition(OrderStatus.PENDING, OrderStatus.PROCESSING)
    assert can_transition(OrderStatus.PENDING, OrderStatus.CANCELLED)
    assert can_transition(OrderStatus.PROCESSING, OrderStatus.COMPLETED)
    assert can_transition(OrderStatus.PROCESSING, OrderStatus.CANCELLED)
    assert ORDER_STATUS_TRANSITIONS[OrderStatus.COMPLETED] == frozenset()
    assert ORDER_STATUS_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()
    assert OrderStatus.COMPLETED.is_terminal and OrderStatus.CANCELLED.is_terminal
    assert not OrderStatus.PENDING.is_terminal


@pytest.mark.parametrize(
    "start,target",
    [
        (OrderStatus.PENDING, "processing"),
        (OrderStatus.PENDING, "cancelled"),
        (OrderStatus.PROCESSING, "completed"),
        (OrderStatus.PROCESSING, "cancelled"),
    ],
)
def test_allowed_transitions(db_session: Session, meals, start, target):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], start)

    updated = OrderService.update_status(db_session, user_id, order.order_id, target)

    assert updated.status == target
    stored = OrderService.get_order_by_id(db_session, user_id, order.order_id)
    assert stored.status == target


@pytest.mark.parametrize(
    "start,target",
    [
        (OrderStatus.PENDING, "completed"),
        (OrderStatus.PENDING, "pending"),
        (OrderStatus.PROCESSING, "pending"),
        (OrderStatus.PROCESSING, "processing"),
        (OrderStatus.COMPLETED, "pending"),
        (OrderStatus.COMPLETED, "processing"),
        (OrderStatus.COMPLETED, "cancelled"),
        (OrderStatus.COMPLETED, "completed"),
        (OrderStatus.CANCELLED, "pending"),
        (OrderStatus.CANCELLED, "processing"),
        (OrderStatus.CANCELLED, "completed"),
    ],
)
def test_rejected_transitions_leave_status_unchanged(db_session: Session, meals, start, target):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], start)

    with pytest.raises(InvalidTransitionError) as exc_info:
        OrderService.update_status(db_session, user_id, order.order_id, target)

    assert exc_info.value.details["from"] == start.value
    assert exc_info.value.details["to"] == target
    assert OrderService.get_order_by_id(db_session, user_id, order.order_id).status == start.value


@pytest.mark.parametrize("bad_status", ["shipped", "", None, "PENDING"])
def test_unknown_status_is_invalid_input(db_session: Session, meals, bad_status):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    with pytest.raises(ServiceValidationError):
        OrderService.update_status(db_session, user_id, order.order_id, bad_status)


def test_update_status_accepts_enum(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    updated = OrderService.update_status(
        db_session, user_id, order.order_id, OrderStatus.PROCESSING
    )

    assert updated.status == "processing"


def test_status_change_does_not_touch_lines_or_total(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[1], quantity=2)
    total = order.total_amount

    OrderService.update_status(db_session, user_id, order.order_id, "processing")
    updated = OrderService.update_status(db_session, user_id, order.order_id, "completed")

    assert updated.total_amount == total
    assert [(i.meal_id, i.quantity) for i in updated.items] == [(meals[1].meal_id, 2)]


# =============================================================================
# CANCEL
# =============================================================================


def test_cancel_pending_order(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    cancelled = OrderService.cancel_order(db_session, user_id, order.order_id)

    assert cancelled.status == "cancelled"


def test_cancel_processing_order(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], OrderStatus.PROCESSING)

    assert OrderService.cancel_order(db_session, user_id, order.order_id).status == "cancelled"


def test_cancel_completed_order_is_rejected(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], OrderStatus.COMPLETED)

    with pytest.raises(InvalidTransitionError) as exc_info:
        OrderService.cancel_order(db_session, user_id, order.order_id)

    assert str(exc_info.value) == "Cannot cancel completed order"
    assert OrderService.get_order_by_id(db_session, user_id, order.order_id).status == "completed"


def test_cancel_twice_is_a_noop(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    OrderService.cancel_order(db_session, user_id, order.order_id)
    again = OrderService.cancel_order(db_session, user_id, order.order_id)

    assert again.status == "cancelled"


def test_cancelled_via_status_update_is_also_idempotent(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], OrderStatus.CANCELLED)

    again = OrderService.update_status(db_session, user_id, order.order_id, "cancelled")

    assert again.status == "cancelled"


# =============================================================================
# PAYMENT STATUS
# =============================================================================


def test_update_payment_status(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    updated = OrderService.update_payment_status(db_session, user_id, order.order_id, "paid")

    assert updated.payment_status == "paid"
    assert updated.status == "pending"


def test_unknown_payment_status_is_invalid_input(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])

    with pytest.raises(ServiceValidationError):
        OrderService.update_payment_status(db_session, user_id, order.order_id, "refunded")


def test_payment_status_of_cancelled_order_is_rejected(db_session: Session, meals):
    user_id = uuid.uuid4()
    order = _order_in_status(db_session, user_id, meals[0], OrderStatus.CANCELLED)

    with pytest.raises(InvalidTransitionError):
        OrderService.update_payment_status(db_session, user_id, order.order_id, "paid")

    stored = OrderService.get_order_by_id(db_session, user_id, order.order_id)
    assert stored.payment_status == "pending"


# =============================================================================
# RETRY POLICY
# =============================================================================


def test_stale_status_write_is_retried(db_session: Session, meals, monkeypatch):
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])
    original = OrderService._load_owned
    attempts = []

    def stale_once(repo, uid, oid, with_lock=False):
        found = original(repo, uid, oid, with_lock=with_lock)
        attempts.append(oid)
        if len(attempts) == 1:
            raise StaleDataError("UPDATE statement on table 'customer_order' matched 0 rows")
        return found

    monkeypatch.setattr(OrderService, "_load_owned", stale_once)
    updated = OrderService.update_status(db_session, user_id, order.order_id, "processing")

    assert len(attempts) == 2
    assert updated.status == "processing"


def test_constraint_error_on_status_write_is_not_retried(db_session: Session, meals, monkeypatch):
    """A constraint violation on an order write is a bug, not a lost race"""
    user_id = uuid.uuid4()
    order = _place_order(db_session, user_id, meals[0])
    attempts = []

    def broken_load(repo, uid, oid, with_lock=False):
        attempts.append(oid)
        raise IntegrityError(
            "UPDATE customer_order", {}, Exception("CHECK constraint failed: ck_order_status")
        )

    monkeypatch.setattr(OrderService, "_load_owned", broken_load)

    with pytest.raises(IntegrityError):
        OrderService.update_status(db_session, user_id, order.order_id, "processing")
    with pytest.raises(IntegrityError):
        OrderService.update_payment_status(db_session, user_id, order.order_id, "paid")

    assert len(attempts) == 2
    monkeypatch.undo()
    assert OrderService.get_order_by_id(db_session, user_id, order.order_id).status == "pending"
