"""
Order Repository - Data access layer for orders
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Order


class OrderRepository(BaseRepository[Order]):
    """Repository for order data access"""

    def __init__(self, db: Session):
        super().__init__(db, Order)

    def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """Get order by ID (no ownership check)"""
        return self.db.query(Order).filter(Order.order_id == order_id).first()

    def get_by_id_and_user(
        self, order_id: UUID, user_id: UUID, with_lock: bool = False
    ) -> Optional[Order]:
        """Get order by ID for specific user (authorization check)"""
        query = self.db.query(Order).filter(
            Order.order_id == order_id, Order.user_id == user_id
        )
        if with_lock:
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_by_user_id(self, user_id: UUID) -> List[Order]:
        """Get all orders for a user, newest first"""
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .all()
        )
