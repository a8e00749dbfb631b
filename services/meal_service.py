import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Meal
from repositories import MealRepository, UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.meals")


class MealService:
    """Read access to the meal catalog"""

    @staticmethod
    def list_user_meals(db: Session, user_id: int, source_type: Optional[str] = None) -> List[Meal]:
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User {user_id} not found")
        meals = MealRepository(db).get_by_user(user_id, source_type)
        logger.debug("meals_listed user_id=%s count=%d", user_id, len(meals))
        return meals

    @staticmethod
    def get_meal(db: Session, meal_id: int) -> Meal:
        meal = MealRepository(db).get_by_id(meal_id)
        if meal is None:
            raise NotFoundError(f"Meal {meal_id} not found")
        return meal
