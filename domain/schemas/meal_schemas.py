"""Pydantic schemas for meals and starter meal selection."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    meal_id: int
    user_id: Optional[int] = None
    name: str
    category_id: Optional[int] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    servings: int = 1
    diet_types: List[str] = Field(default_factory=list)
    audience: str = "adult"
    is_drink: bool = False
    is_system_meal: bool = False
    meal_source_type: str = "scratch"
    original_meal_id: Optional[int] = None
    created_at: Optional[datetime] = None


class StarterMealsResponse(BaseModel):
    breakfast: List[MealResponse]
    lunch: List[MealResponse]
    dinner: List[MealResponse]


class PreloadResponse(BaseModel):
    user_id: int
    inserted: int
    message: Optional[str] = None
