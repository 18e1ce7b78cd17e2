"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    build_engine,
    init_database,
    get_db_session,
    utcnow,
)
from domain.models.meal import Meal
from domain.models.cart import (
    Cart,
    CartItem,
    MAX_QUANTITY,
    MAX_UNIT_PRICE,
    MAX_TOTAL_AMOUNT,
)
from domain.models.order import Order, OrderItem

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "build_engine",
    "init_database",
    "get_db_session",
    "utcnow",
    # Catalog models
    "Meal",
    # Cart models
    "Cart",
    "CartItem",
    "MAX_QUANTITY",
    "MAX_UNIT_PRICE",
    "MAX_TOTAL_AMOUNT",
    # Order models
    "Order",
    "OrderItem",
]
