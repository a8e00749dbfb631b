"""
User Repository - Data access layer for user-related operations
"""

from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser, UserPreference, StarterMealSeed
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_username(self, username: str) -> Optional[AppUser]:
        """Get user by username"""
        return self.db.query(AppUser).filter(AppUser.username == username).first()

    def get_for_update(self, user_id: int) -> Optional[AppUser]:
        """Get user and lock the row until the transaction ends.

        SQLite has no row locks and ignores FOR UPDATE.
        """
        return (
            self.db.query(AppUser)
            .filter(AppUser.user_id == user_id)
            .with_for_update()
            .first()
        )

    def create_user(self, username: str, display_name: str = None) -> AppUser:
        """Create a new user"""
        user = AppUser(username=username, display_name=display_name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with username {username} already exists")

    def has_starter_meals_loaded(self, user_id: int) -> bool:
        """Read the per-user starter seed flag (False for unknown users)"""
        loaded = (
            self.db.query(AppUser.starter_meals_loaded)
            .filter(AppUser.user_id == user_id)
            .scalar()
        )
        return bool(loaded)

    def mark_starter_meals_loaded(self, user: AppUser) -> None:
        """Set the seed flag. Part of the seeding transaction, so only flushes."""
        user.starter_meals_loaded = True
        self.db.flush()

    def delete_user(self, user_id: int) -> bool:
        """Delete user and all related data (cascade)"""
        return self.delete(user_id)


class PreferenceRepository(BaseRepository[UserPreference]):
    """Repository for diet preference data access"""

    def __init__(self, db: Session):
        super().__init__(db, UserPreference)

    def get_by_user_id(self, user_id: int) -> Optional[UserPreference]:
        return (
            self.db.query(UserPreference)
            .filter(UserPreference.user_id == user_id)
            .first()
        )

    def get_diet_types(self, user_id: int) -> set[str]:
        """Diet types for a user, empty set when none are stored"""
        pref = self.get_by_user_id(user_id)
        if pref is None or not pref.diet_types:
            return set()
        return {str(d) for d in pref.diet_types if d}

    def set_diet_types(self, user_id: int, diet_types: List[str]) -> UserPreference:
        """Replace the diet type list, creating the row if needed"""
        pref = self.get_by_user_id(user_id)
        if pref:
            pref.diet_types = list(diet_types)
        else:
            pref = UserPreference(user_id=user_id, diet_types=list(diet_types))
            self.db.add(pref)
        self.db.flush()
        return pref


class StarterSeedRepository(BaseRepository[StarterMealSeed]):
    """Repository for the per-user starter seed marker"""

    def __init__(self, db: Session):
        super().__init__(db, StarterMealSeed)

    def add_marker(self, user_id: int) -> StarterMealSeed:
        """Insert the marker and flush.

        Raises IntegrityError when another transaction already seeded the user.
        """
        return self.add(StarterMealSeed(user_id=user_id, meal_count=0))
