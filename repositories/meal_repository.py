"""
Meal Repository - read-only access to the meal catalog
"""

from typing import Dict, Iterable, Optional, Any
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal


class MealRepository(BaseRepository[Meal]):
    """Repository for catalog lookups used by cart and order operations"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_by_id(self, meal_id: UUID) -> Optional[Meal]:
        """Get meal by ID"""
        return self.db.query(Meal).filter(Meal.meal_id == meal_id).first()

    def get_many(self, meal_ids: Iterable[UUID]) -> Dict[UUID, Meal]:
        """Fetch several meals in one query, keyed by meal_id (missing ids are absent)"""
        ids = list({mid for mid in meal_ids})
        if not ids:
            return {}
        meals = self.db.query(Meal).filter(Meal.meal_id.in_(ids)).all()
        return {m.meal_id: m for m in meals}

    def resolve_meal(self, meal_id: UUID) -> Dict[str, Any]:
        """
        Resolve a meal reference.

        Returns:
            {"exists": bool, "unit_price": Decimal | None}
        """
        meal = self.get_by_id(meal_id)
        if meal is None:
            return {"exists": False, "unit_price": None}
        return {"exists": True, "unit_price": meal.price}
