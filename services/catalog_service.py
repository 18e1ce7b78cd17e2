"""Meal catalog lookups used by cart and order operations"""

import logging
from typing import Any, Dict, Iterable, Mapping
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Meal
from repositories import MealRepository

logger = logging.getLogger("mealorder.catalog")


class CatalogService:
    @staticmethod
    def resolve_meal(db: Session, meal_id: UUID) -> Dict[str, Any]:
        """Return {"exists": bool, "unit_price": Decimal | None} for ``meal_id``"""
        return MealRepository(db).resolve_meal(meal_id)

    @staticmethod
    def meals_for(db: Session, items: Iterable[Any]) -> Mapping[UUID, Meal]:
        """
        Load catalog meals referenced by cart or order lines, for display.

        Lines whose meal has since left the catalog are simply not expanded.
        """
        meal_ids = [item.meal_id for item in items]
        meals = MealRepository(db).get_many(meal_ids)
        missing = set(meal_ids) - set(meals)
        if missing:
            logger.debug("Meals no longer in catalog: %s", sorted(str(m) for m in missing))
        return meals
