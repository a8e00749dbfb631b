from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser
from repositories import UserRepository, PreferenceRepository
from services.starter_meal_service import StarterMealSelector, StarterMealService
from app.exceptions import NotFoundError, StarterMealSeedError

logger = logging.getLogger("mealplanner.profile")


class ProfileService:
    """Business logic for users, diet preferences and onboarding"""

    @staticmethod
    def create_user(db: Session, username: str, display_name: str = None) -> AppUser:
        user = UserRepository(db).create_user(username, display_name)
        logger.info(f"user_created user_id={user.user_id}")
        return user

    @staticmethod
    def get_user_profile(db: Session, user_id: int) -> AppUser:
        """Retrieve a user with diet preferences loaded"""
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            logger.warning(f"profile_not_found user_id={user_id}")
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def set_diet_preferences(db: Session, user_id: int, diet_types: List[str]) -> AppUser:
        """Replace the user's diet type set"""
        user = ProfileService.get_user_profile(db, user_id)
        PreferenceRepository(db).set_diet_types(user_id, diet_types)
        db.commit()
        db.refresh(user)
        logger.info(
            f"diet_preferences_updated user_id={user_id} count={len(diet_types)}"
        )
        return user

    @staticmethod
    def complete_onboarding(
        db: Session,
        user_id: int,
        diet_types: Optional[List[str]] = None,
        selector: Optional[StarterMealSelector] = None,
    ) -> Tuple[AppUser, int]:
        """
        Mark onboarding complete and seed starter meals.

        Diet types, when given, are stored first so the selection respects
        them. A seeding failure does not fail onboarding: it is logged and the
        loaded flag stays unset for a later retry.
        Returns (user, number of starter meals inserted).
        """
        user = ProfileService.get_user_profile(db, user_id)
        if diet_types is not None:
            PreferenceRepository(db).set_diet_types(user_id, diet_types)
        user.onboarding_completed = True
        db.commit()

        inserted = 0
        try:
            inserted = StarterMealService.preload_starter_meals(db, user_id, selector)
        except StarterMealSeedError:
            logger.exception(f"onboarding_starter_meals_failed user_id={user_id}")

        db.refresh(user)
        logger.info(
            f"onboarding_completed user_id={user_id} starter_meals_inserted={inserted}"
        )
        return user, inserted

    @staticmethod
    def delete_user(db: Session, user_id: int) -> bool:
        return UserRepository(db).delete_user(user_id)
