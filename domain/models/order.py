"""
Order models.

An order is written once at checkout. Afterwards only ``status``,
``payment_status`` and ``updated_at`` change; lines and total are frozen.
Orders are never deleted.
"""

from sqlalchemy import (
    Column,
    Text,
    Integer,
    Numeric,
    TIMESTAMP,
    ForeignKey,
    CheckConstraint,
    Index,
    Uuid,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow


class Order(Base):
    """Committed order created from a cart"""

    __tablename__ = "customer_order"

    order_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    payment_status = Column(Text, nullable=False, default="pending")
    payment_method = Column(Text, nullable=False)

    # Shipping address
    street = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    zip_code = Column(Text, nullable=False)
    country = Column(Text, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_order_total_nonneg"),
        CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'cancelled')",
            name="ck_order_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'paid', 'failed')",
            name="ck_order_payment_status",
        ),
        Index("ix_customer_order_user_created", "user_id", "created_at"),
    )

    @property
    def shipping_address(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
        }


class OrderItem(Base):
    """Frozen copy of a cart line"""

    __tablename__ = "order_item"

    order_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(
        Uuid,
        ForeignKey("customer_order.order_id", ondelete="CASCADE"),
        nullable=False,
    )
    meal_id = Column(Uuid, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_order_item_price_nonneg"),
    )
