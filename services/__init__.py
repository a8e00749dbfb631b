"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.meal_service import MealService
from services.starter_meal_service import StarterMealSelector, StarterMealService
from services.planner_service import PlannerService

# Note: reorder contains ordering helpers and the three-step swap, not a class

__all__ = [
    "ProfileService",
    "MealService",
    "StarterMealSelector",
    "StarterMealService",
    "PlannerService",
]
