"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import (
    UserRepository,
    PreferenceRepository,
    StarterSeedRepository,
)
from repositories.meal_repository import MealRepository, MealCategoryRepository
from repositories.planner_repository import (
    PlannerWeekRepository,
    PlannerDayRepository,
    PlannerEntryRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PreferenceRepository",
    "StarterSeedRepository",
    "MealRepository",
    "MealCategoryRepository",
    "PlannerWeekRepository",
    "PlannerDayRepository",
    "PlannerEntryRepository",
]
