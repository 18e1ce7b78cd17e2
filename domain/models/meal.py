"""
Meal catalog model.

The catalog is owned by a separate service; this table is only read here to
check that a meal exists, to snapshot its price and to expand cart/order lines
for display.
"""

from sqlalchemy import (
    Column,
    Text,
    Integer,
    Numeric,
    TIMESTAMP,
    CheckConstraint,
    Uuid,
)
import uuid

from domain.models.database import Base, utcnow


class Meal(Base):
    """Catalog meal"""

    __tablename__ = "meal"

    meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    meal_name = Column(Text, nullable=False)
    img_url = Column(Text)
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    calories = Column(Integer, nullable=False, default=0)
    category = Column(Text, nullable=False, default="regular food")
    serving_time = Column(Text)
    description = Column(Text)
    ingredient = Column(Text)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_meal_price_nonneg"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_meal_rating_range"),
        CheckConstraint("calories >= 0", name="ck_meal_calories_nonneg"),
    )
