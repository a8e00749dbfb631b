"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserCreate,
    UserResponse,
    DietPreferencesUpdate,
    OnboardingRequest,
    OnboardingResponse,
)
from domain.schemas.meal_schemas import (
    MealResponse,
    StarterMealsResponse,
    PreloadResponse,
)
from domain.schemas.plan_schemas import (
    PlannerWeekResponse,
    WeekRenameRequest,
    PlannerDayResponse,
    PlannerEntryResponse,
    AddEntryRequest,
    SetSlotEntryRequest,
    PositionUpdateRequest,
    SwapEntriesRequest,
    SwapEntriesResponse,
    PlannerDayWithEntries,
    FullPlannerWeek,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserResponse",
    "DietPreferencesUpdate",
    "OnboardingRequest",
    "OnboardingResponse",
    # Meal schemas
    "MealResponse",
    "StarterMealsResponse",
    "PreloadResponse",
    # Planner schemas
    "PlannerWeekResponse",
    "WeekRenameRequest",
    "PlannerDayResponse",
    "PlannerEntryResponse",
    "AddEntryRequest",
    "SetSlotEntryRequest",
    "PositionUpdateRequest",
    "SwapEntriesRequest",
    "SwapEntriesResponse",
    "PlannerDayWithEntries",
    "FullPlannerWeek",
]
