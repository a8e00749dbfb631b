"""User management and onboarding routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from typing import Optional

from domain.models import get_db_session
from domain.schemas.user_schemas import (
    UserCreate,
    UserResponse,
    DietPreferencesUpdate,
    OnboardingRequest,
    OnboardingResponse,
)
from domain.mappers import UserMapper
from services.profile_service import ProfileService
from api.responses import ERROR_RESPONSES
from app.exceptions import NotFoundError

router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)
logger = logging.getLogger("mealplanner.api.users")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db_session)):
    """Create a new user from JSON body"""
    new_user = ProfileService.create_user(db, user.username, user.display_name)
    return UserMapper.to_response(new_user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db_session)):
    """Get a user including diet preferences and onboarding flags."""
    user = ProfileService.get_user_profile(db, user_id)
    return UserMapper.to_response(user)


@router.put("/{user_id}/diet-preferences", response_model=UserResponse)
def set_diet_preferences(
    user_id: int, body: DietPreferencesUpdate, db: Session = Depends(get_db_session)
):
    """Replace the user's diet types (OR-matched against meal tags)."""
    user = ProfileService.set_diet_preferences(db, user_id, body.diet_types)
    return UserMapper.to_response(user)


@router.post("/{user_id}/onboarding", response_model=OnboardingResponse)
def complete_onboarding(
    user_id: int,
    body: Optional[OnboardingRequest] = None,
    db: Session = Depends(get_db_session),
):
    """
    Complete onboarding for a user.

    Stores the diet types when given, then seeds starter meals once. A seeding
    failure is reported through ``starter_meals_loaded: false`` and does not
    fail the request.
    """
    diet_types = body.diet_types if body else None
    user, inserted = ProfileService.complete_onboarding(db, user_id, diet_types)
    return OnboardingResponse(
        user=UserMapper.to_response(user),
        starter_meals_inserted=inserted,
        starter_meals_loaded=bool(user.starter_meals_loaded),
    )


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db_session)):
    """Delete a user and all their related data."""
    if not ProfileService.delete_user(db, user_id):
        raise NotFoundError(f"User {user_id} not found")
    return {"status": "ok", "deleted": user_id}
