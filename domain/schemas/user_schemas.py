"""Pydantic schemas for users, diet preferences and onboarding."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _clean_diet_types(values: List[str]) -> List[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    cleaned: list[str] = []
    for v in values:
        v = (v or "").strip()
        if v and v not in cleaned:
            cleaned.append(v)
    return cleaned


DietTypes = Annotated[List[str], AfterValidator(_clean_diet_types)]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    display_name: Optional[str] = Field(default=None, max_length=200)


class DietPreferencesUpdate(BaseModel):
    diet_types: DietTypes = Field(default_factory=list)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    display_name: Optional[str] = None
    onboarding_completed: bool
    starter_meals_loaded: bool
    diet_types: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class OnboardingRequest(BaseModel):
    """Body for completing onboarding. ``diet_types=None`` keeps stored preferences."""

    diet_types: Optional[DietTypes] = None


class OnboardingResponse(BaseModel):
    user: UserResponse
    starter_meals_inserted: int = 0
    starter_meals_loaded: bool
