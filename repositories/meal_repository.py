"""
Meal Repository - Data access layer for the meal catalog
"""

from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal, MealCategory
from domain.enums import MealSourceType


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    # Columns carried over when a system meal is copied into a user's collection
    COPY_FIELDS = (
        "name",
        "category_id",
        "ingredients",
        "instructions",
        "image_url",
        "servings",
        "source_url",
        "diet_types",
        "audience",
        "is_drink",
        "drink_type",
        "is_ready_meal",
        "meal_format",
    )

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_system_meals_by_category(self, category_ids: Iterable[int]) -> List[Meal]:
        """All system (template) meals in the given categories"""
        ids = list(category_ids)
        if not ids:
            return []
        return (
            self.db.query(Meal)
            .filter(Meal.is_system_meal.is_(True), Meal.category_id.in_(ids))
            .order_by(Meal.meal_id)
            .all()
        )

    def get_by_user(self, user_id: int, source_type: Optional[str] = None) -> List[Meal]:
        """Meals owned by a user, optionally restricted to one source type"""
        query = self.db.query(Meal).filter(Meal.user_id == user_id)
        if source_type:
            query = query.filter(Meal.meal_source_type == source_type)
        return query.order_by(Meal.meal_id).all()

    def copy_to_user(
        self,
        user_id: int,
        meal: Meal,
        source_type: str = MealSourceType.STARTER.value,
    ) -> Meal:
        """Create a user-owned copy of ``meal`` with a new id.

        Only flushes; the caller owns the transaction.
        """
        data = {field: getattr(meal, field) for field in self.COPY_FIELDS}
        data["ingredients"] = list(data["ingredients"] or [])
        data["instructions"] = list(data["instructions"] or [])
        data["diet_types"] = list(data["diet_types"] or [])
        copy = Meal(
            user_id=user_id,
            is_system_meal=False,
            meal_source_type=source_type,
            original_meal_id=meal.meal_id,
            **data,
        )
        return self.add(copy)


class MealCategoryRepository(BaseRepository[MealCategory]):
    """Repository for meal categories"""

    def __init__(self, db: Session):
        super().__init__(db, MealCategory)

    def get_by_name(self, name: str) -> Optional[MealCategory]:
        return self.db.query(MealCategory).filter(MealCategory.name == name).first()

    def get_or_create(self, category_id: int, name: str) -> MealCategory:
        category = self.get_by_id(category_id)
        if category is None:
            category = self.add(MealCategory(category_id=category_id, name=name))
        return category
