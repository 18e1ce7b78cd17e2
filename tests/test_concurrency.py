"""
Concurrent cart writers.

Two sessions on a file-backed SQLite database stand in for two requests of
the same user. A competing write is injected between the moment one request
reads the cart and the moment it commits; the version check must reject the
stale write and the retry must re-apply it on top of the competing one.
"""

import uuid
from decimal import Decimal

import pytest

from app.config import settings
from app.exceptions import ConflictError, NotFoundError
from repositories import CartRepository
from services.cart_service import CartService
from services.checkout_service import CheckoutService
from services.order_service import OrderService
from test_fixtures import SHIPPING_ADDRESS, PAYMENT_METHOD, make_meal


@pytest.fixture
def meal_id(file_session_factory):
    meal = make_meal(meal_name="Beef Rendang", price=Decimal("12.50"))
    with file_session_factory() as session:
        session.add(meal)
        session.commit()
        return meal.meal_id


def _race_after_read(monkeypatch, victim_session, competing_write, times=1):
    """
    Run ``competing_write`` right after ``victim_session`` reads the cart for
    a write, at most ``times`` times. Returns a list that records each race.
    """
    original = CartRepository.get_by_user_id
    races = []

    def racing_get(self, user_id, with_lock=False):
        cart = original(self, user_id, with_lock=with_lock)
        if self.db is victim_session and with_lock and len(races) < times:
            races.append(user_id)
            competing_write()
        return cart

    monkeypatch.setattr(CartRepository, "get_by_user_id", racing_get)
    return races


def test_lost_update_is_retried(file_session_factory, meal_id, monkeypatch):
    user_id = uuid.uuid4()
    with file_session_factory() as first:
        CartService.add_item(first, user_id, meal_id, 1)

    def other_request():
        with file_session_factory() as other:
            CartService.add_item(other, user_id, meal_id, 2)

    with file_session_factory() as session:
        races = _race_after_read(monkeypatch, session, other_request)
        cart = CartService.add_item(session, user_id, meal_id, 3)

    assert len(races) == 1
    assert cart.items[0].quantity == 6
    assert cart.total_amount == Decimal("75.00")

    monkeypatch.undo()
    with file_session_factory() as check:
        stored = CartService.get_cart(check, user_id)
        assert stored.items[0].quantity == 6
        assert stored.total_amount == Decimal("75.00")
        assert stored.version == 3


def test_concurrent_first_adds_create_one_cart(file_session_factory, meal_id, monkeypatch):
    user_id = uuid.uuid4()

    def other_request():
        with file_session_factory() as other:
            CartService.add_item(other, user_id, meal_id, 2)

    with file_session_factory() as session:
        races = _race_after_read(monkeypatch, session, other_request)
        cart = CartService.add_item(session, user_id, meal_id, 3)

    assert len(races) == 1
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5
    assert cart.total_amount == Decimal("62.50")


def test_conflict_after_retries_exhausted(file_session_factory, meal_id, monkeypatch):
    user_id = uuid.uuid4()
    monkeypatch.setattr(settings, "cart_write_retries", 2)
    with file_session_factory() as first:
        CartService.add_item(first, user_id, meal_id, 1)

    def other_request():
        with file_session_factory() as other:
            CartService.add_item(other, user_id, meal_id, 1)

    with file_session_factory() as session:
        races = _race_after_read(monkeypatch, session, other_request, times=10)
        with pytest.raises(ConflictError) as exc_info:
            CartService.add_item(session, user_id, meal_id, 5)

    assert len(races) == 2
    assert exc_info.value.details["attempts"] == 2

    monkeypatch.undo()
    with file_session_factory() as check:
        # both competing adds landed, the losing one did not
        assert CartService.get_cart(check, user_id).items[0].quantity == 3


def test_add_racing_checkout_lands_in_the_order(file_session_factory, meal_id, monkeypatch):
    user_id = uuid.uuid4()
    with file_session_factory() as first:
        CartService.add_item(first, user_id, meal_id, 1)

    def other_request():
        with file_session_factory() as other:
            CartService.add_item(other, user_id, meal_id, 2)

    with file_session_factory() as session:
        _race_after_read(monkeypatch, session, other_request)
        order = CheckoutService.create_order(session, user_id, SHIPPING_ADDRESS, PAYMENT_METHOD)

    assert order.items[0].quantity == 3
    assert order.total_amount == Decimal("37.50")

    monkeypatch.undo()
    with file_session_factory() as check:
        assert len(OrderService.get_orders(check, user_id)) == 1
        with pytest.raises(NotFoundError):
            CartService.get_cart(check, user_id)
