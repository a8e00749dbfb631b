"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

from domain.models import AppUser
from domain.schemas.user_schemas import UserResponse


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_response(user: AppUser) -> UserResponse:
        """
        Convert AppUser ORM model to UserResponse DTO.

        Args:
            user: AppUser ORM instance; its preference row is loaded lazily

        Returns:
            UserResponse DTO with the diet type list flattened in
        """
        return UserResponse(
            user_id=user.user_id,
            username=user.username,
            display_name=user.display_name,
            onboarding_completed=bool(user.onboarding_completed),
            starter_meals_loaded=bool(user.starter_meals_loaded),
            diet_types=user.diet_types,
            created_at=user.created_at,
        )
