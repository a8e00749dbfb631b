"""Meal catalog and starter meal routes"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from domain.enums import MealSourceType
from domain.models import get_db_session
from domain.schemas.meal_schemas import MealResponse, PreloadResponse, StarterMealsResponse
from services.meal_service import MealService
from services.profile_service import ProfileService
from services.starter_meal_service import StarterMealService
from api.responses import ERROR_RESPONSES

router = APIRouter(tags=["Meals"], responses=ERROR_RESPONSES)
logger = logging.getLogger("mealplanner.api.meals")


@router.get("/meals", response_model=List[MealResponse])
def list_user_meals(
    user_id: int = Query(..., description="Owner of the meals"),
    source_type: Optional[MealSourceType] = Query(None, description="Filter by meal source"),
    db: Session = Depends(get_db_session),
):
    """List meals owned by a user (starter copies included)."""
    meals = MealService.list_user_meals(
        db, user_id, source_type.value if source_type else None
    )
    return [MealResponse.model_validate(m) for m in meals]


@router.get("/meals/{meal_id}", response_model=MealResponse)
def get_meal(meal_id: int, db: Session = Depends(get_db_session)):
    return MealResponse.model_validate(MealService.get_meal(db, meal_id))


@router.get("/starter-meals", response_model=StarterMealsResponse)
def preview_starter_meals(
    user_id: int = Query(..., description="User to select starter meals for"),
    db: Session = Depends(get_db_session),
):
    """
    Preview a random, diet-aware starter selection for a user.

    Nothing is written; every call draws a new selection.
    """
    ProfileService.get_user_profile(db, user_id)
    selection = StarterMealService.get_starter_meals(db, user_id)
    return StarterMealsResponse(
        breakfast=[MealResponse.model_validate(m) for m in selection.breakfast],
        lunch=[MealResponse.model_validate(m) for m in selection.lunch],
        dinner=[MealResponse.model_validate(m) for m in selection.dinner],
    )


@router.post("/starter-meals/preload", response_model=PreloadResponse)
def preload_starter_meals(
    user_id: int = Query(..., description="User to seed starter meals for"),
    db: Session = Depends(get_db_session),
):
    """
    Copy starter meals into the user's collection.

    Idempotent: returns ``inserted: 0`` once the user has been seeded.
    """
    inserted = StarterMealService.preload_starter_meals(db, user_id)
    message = (
        "Starter meals loaded." if inserted else "Starter meals were already loaded."
    )
    logger.info("Preload for user %s inserted %d meals", user_id, inserted)
    return PreloadResponse(user_id=user_id, inserted=inserted, message=message)
