"""
Cart Repository - Data access layer for per-user carts
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Cart, utcnow


class CartRepository(BaseRepository[Cart]):
    """Repository for cart data access"""

    def __init__(self, db: Session):
        super().__init__(db, Cart)

    def get_by_id(self, user_id: UUID) -> Optional[Cart]:
        """Carts are keyed by their owner"""
        return self.get_by_user_id(user_id)

    def get_by_user_id(self, user_id: UUID, with_lock: bool = False) -> Optional[Cart]:
        """
        Get the cart owned by ``user_id``.

        Args:
            user_id: Owner UUID
            with_lock: take a row lock (SELECT ... FOR UPDATE) for a
                read-modify-write; backends without row locks ignore it and
                rely on the version check instead

        Returns:
            Cart or None if the user has no cart
        """
        query = self.db.query(Cart).filter(Cart.user_id == user_id)
        if with_lock:
            query = query.with_for_update()
        # Always reload from the database so a retried transaction never
        # works on a stale identity-map copy.
        return query.populate_existing().first()

    def create(self, user_id: UUID) -> Cart:
        """Stage a new empty cart for ``user_id``"""
        now = utcnow()
        cart = Cart(user_id=user_id, total_amount=0, created_at=now, updated_at=now)
        self.db.add(cart)
        return cart

    def delete_by_user_id(self, user_id: UUID, with_lock: bool = False) -> bool:
        """Stage deletion of the user's cart; returns False if there was none"""
        cart = self.get_by_user_id(user_id, with_lock=with_lock)
        if cart is None:
            return False
        self.delete(cart)
        return True
