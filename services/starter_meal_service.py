from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, StarterMealSeedError
from domain.enums import MealSourceType
from domain.models import Meal
from repositories import (
    MealRepository,
    PreferenceRepository,
    StarterSeedRepository,
    UserRepository,
)

logger = logging.getLogger("mealplanner.starter_meals")


@dataclass
class StarterMealSelection:
    breakfast: List[Meal] = field(default_factory=list)
    lunch: List[Meal] = field(default_factory=list)
    dinner: List[Meal] = field(default_factory=list)

    def all_meals(self) -> List[Meal]:
        return [*self.breakfast, *self.lunch, *self.dinner]


def shuffled(items: Iterable, rng: random.Random) -> list:
    """Uniformly shuffled copy of ``items`` (Fisher-Yates via Random.shuffle)"""
    copy = list(items)
    rng.shuffle(copy)
    return copy


def filter_by_diet(meals: Iterable[Meal], diet_types: Iterable[str]) -> List[Meal]:
    """Meals tagged with at least one of ``diet_types``.

    Meals without tags never match. An empty ``diet_types`` returns all meals.
    """
    wanted = set(diet_types)
    if not wanted:
        return list(meals)
    return [m for m in meals if m.diet_types and wanted.intersection(m.diet_types)]


def pick_with_backfill(
    filtered: Sequence[Meal],
    all_meals: Sequence[Meal],
    count: int,
    rng: random.Random,
) -> List[Meal]:
    """Pick up to ``count`` meals, preferring ``filtered``.

    When the filtered meals run short, the rest of ``all_meals`` is shuffled
    and appended until ``count`` is reached or candidates run out.
    """
    picked = shuffled(filtered, rng)
    if len(picked) >= count:
        return picked[:count]

    picked_ids = {m.meal_id for m in picked}
    remaining = shuffled((m for m in all_meals if m.meal_id not in picked_ids), rng)
    picked.extend(remaining[: count - len(picked)])
    return picked


class StarterMealSelector:
    """
    Picks starter meals for a user:
    - partitions the system catalog into breakfast, lunch and dinner
    - without diet preferences: a random ``per_category`` meals of each
    - with diet preferences: matching meals first, backfilled from the
      whole category when fewer than ``per_category`` match
    """

    def __init__(
        self,
        per_category: Optional[int] = None,
        category_ids: Optional[Sequence[int]] = None,
        rng: Optional[random.Random] = None,
    ):
        if per_category is None:
            per_category = settings.starter_meals_per_category
        if per_category < 0:
            raise ValueError("per_category must not be negative")
        if category_ids is None:
            category_ids = settings.starter_category_ids
        self.per_category = per_category
        self.category_ids = tuple(category_ids)
        if len(self.category_ids) != 3:
            raise ValueError("category_ids must be (breakfast, lunch, dinner)")
        self.rng = rng or random.Random()

    def _pick(self, candidates: List[Meal], diet_types: set[str]) -> List[Meal]:
        if not diet_types:
            return shuffled(candidates, self.rng)[: self.per_category]
        return pick_with_backfill(
            filter_by_diet(candidates, diet_types),
            candidates,
            self.per_category,
            self.rng,
        )

    def select(self, system_meals: Iterable[Meal], diet_types: Iterable[str] = ()) -> StarterMealSelection:
        diet_types = {d for d in diet_types if d}
        by_category: dict[int, List[Meal]] = {cid: [] for cid in self.category_ids}
        for meal in system_meals:
            if meal.category_id in by_category:
                by_category[meal.category_id].append(meal)

        breakfast_id, lunch_id, dinner_id = self.category_ids
        return StarterMealSelection(
            breakfast=self._pick(by_category[breakfast_id], diet_types),
            lunch=self._pick(by_category[lunch_id], diet_types),
            dinner=self._pick(by_category[dinner_id], diet_types),
        )


class StarterMealService:
    """Reads the system catalog and seeds starter meals into user collections"""

    @staticmethod
    def get_starter_meals(
        db: Session, user_id: int, selector: Optional[StarterMealSelector] = None
    ) -> StarterMealSelection:
        """Preview a starter selection for a user. Writes nothing."""
        selector = selector or StarterMealSelector()
        diet_types = PreferenceRepository(db).get_diet_types(user_id)
        catalog = MealRepository(db).get_system_meals_by_category(selector.category_ids)
        selection = selector.select(catalog, diet_types)

        logger.info(
            "starter_meals_selected user_id=%s diets=%d catalog=%d "
            "breakfast=%d lunch=%d dinner=%d",
            user_id,
            len(diet_types),
            len(catalog),
            len(selection.breakfast),
            len(selection.lunch),
            len(selection.dinner),
        )
        return selection

    @staticmethod
    def has_starter_meals_loaded(db: Session, user_id: int) -> bool:
        return UserRepository(db).has_starter_meals_loaded(user_id)

    @staticmethod
    def preload_starter_meals(
        db: Session, user_id: int, selector: Optional[StarterMealSelector] = None
    ) -> int:
        """
        Copy a starter selection into the user's meals, at most once per user.

        Returns the number of meals inserted, 0 when the user was already
        seeded. The user row is locked, the seed marker inserted, meals copied
        and the flag set in one transaction; a failure rolls all of it back.
        """
        user_repo = UserRepository(db)

        try:
            user = user_repo.get_for_update(user_id)
            if user is None:
                db.rollback()
                raise NotFoundError(f"User {user_id} not found")

            if user.starter_meals_loaded:
                db.rollback()
                logger.info("starter_meals_already_loaded user_id=%s", user_id)
                return 0

            try:
                marker = StarterSeedRepository(db).add_marker(user_id)
            except IntegrityError:
                db.rollback()
                logger.info("starter_meals_seeded_concurrently user_id=%s", user_id)
                return 0

            selection = StarterMealService.get_starter_meals(db, user_id, selector)
            meal_repo = MealRepository(db)
            starter_meals = selection.all_meals()
            for meal in starter_meals:
                meal_repo.copy_to_user(user_id, meal, MealSourceType.STARTER.value)

            marker.meal_count = len(starter_meals)
            user_repo.mark_starter_meals_loaded(user)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("starter_meals_preload_failed user_id=%s", user_id)
            raise StarterMealSeedError(details={"user_id": user_id}) from e

        logger.info(
            "starter_meals_preloaded user_id=%s count=%d", user_id, len(starter_meals)
        )
        return len(starter_meals)
