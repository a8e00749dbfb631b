"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import AppUser, UserPreference, StarterMealSeed
from domain.models.meal import MealCategory, Meal
from domain.models.planner import PlannerWeek, PlannerDay, PlannerEntry

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # User models
    "AppUser",
    "UserPreference",
    "StarterMealSeed",
    # Meal models
    "MealCategory",
    "Meal",
    # Planner models
    "PlannerWeek",
    "PlannerDay",
    "PlannerEntry",
]
