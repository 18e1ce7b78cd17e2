"""
Shopping cart models.

One ``Cart`` row per user (the user id is the primary key). Line items live in
``cart_item`` and are written together with the parent row in one transaction.
"""

from sqlalchemy import (
    Column,
    Integer,
    Numeric,
    TIMESTAMP,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from decimal import Decimal
import uuid

from domain.models.database import Base, utcnow

# Largest values the columns below (and the order columns they are copied
# into) can store: Integer, Numeric(10, 2) and Numeric(12, 2).
MAX_QUANTITY = 2**31 - 1
MAX_UNIT_PRICE = Decimal("99999999.99")
MAX_TOTAL_AMOUNT = Decimal("9999999999.99")


class Cart(Base):
    """Per-user staging cart"""

    __tablename__ = "cart"

    user_id = Column(Uuid, primary_key=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
        lazy="selectin",
    )

    # Every UPDATE/DELETE is guarded by "WHERE version = <loaded version>"
    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_cart_total_nonneg"),
    )


class CartItem(Base):
    """Line item in a cart (price is a snapshot taken when the line was created)"""

    __tablename__ = "cart_item"

    cart_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("cart.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    meal_id = Column(Uuid, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    cart = relationship("Cart", back_populates="items")

    __table_args__ = (
        UniqueConstraint("user_id", "meal_id", name="uq_cart_item_user_meal"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_cart_item_price_nonneg"),
    )
