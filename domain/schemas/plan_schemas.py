from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.enums import Audience, DrinkType, MealType


class PlannerWeekResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    week_id: int
    user_id: int
    week_number: int
    week_name: str


class WeekRenameRequest(BaseModel):
    week_name: str = Field(..., min_length=1, max_length=100)


class PlannerDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_id: int
    week_id: int
    day_of_week: int


class PlannerEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: int
    day_id: int
    meal_type: MealType
    audience: Audience
    meal_id: int
    position: int
    calories: Optional[int] = 0
    is_drink: bool
    drink_type: Optional[DrinkType] = None


class AddEntryRequest(BaseModel):
    meal_type: MealType
    meal_id: int = Field(..., gt=0)
    audience: Audience = Audience.ADULT
    calories: int = Field(default=0, ge=0)
    is_drink: bool = False
    drink_type: Optional[DrinkType] = None


class SetSlotEntryRequest(BaseModel):
    """Set the single meal of a slot, or clear the slot with ``meal_id=None``."""

    meal_type: MealType
    meal_id: Optional[int] = Field(default=None, gt=0)
    audience: Audience = Audience.ADULT
    calories: int = Field(default=0, ge=0)
    is_drink: bool = False
    drink_type: Optional[DrinkType] = None


class PositionUpdateRequest(BaseModel):
    position: int


class SwapEntriesRequest(BaseModel):
    entry_a_id: int = Field(..., gt=0)
    entry_b_id: int = Field(..., gt=0)

    @model_validator(mode="after")
    def _distinct(self):
        if self.entry_a_id == self.entry_b_id:
            raise ValueError("entry_a_id and entry_b_id must differ")
        return self


class SwapEntriesResponse(BaseModel):
    entries: List[PlannerEntryResponse]
    message: Optional[str] = None


class PlannerDayWithEntries(PlannerDayResponse):
    entries: List[PlannerEntryResponse] = Field(default_factory=list)


class FullPlannerWeek(PlannerWeekResponse):
    days: List[PlannerDayWithEntries] = Field(default_factory=list)
