"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Integer,
    Boolean,
    JSON,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, unique=True, nullable=False)
    display_name = Column(Text)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    starter_meals_loaded = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    preference = relationship(
        "UserPreference",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    starter_seed = relationship(
        "StarterMealSeed",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    meals = relationship("Meal", back_populates="user", cascade="all, delete-orphan")
    planner_weeks = relationship(
        "PlannerWeek", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def diet_types(self) -> list[str]:
        if self.preference is None:
            return []
        return list(self.preference.diet_types or [])


class UserPreference(Base):
    """Diet preferences used to bias starter meal selection"""

    __tablename__ = "user_preference"

    user_id = Column(
        Integer,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    diet_types = Column(JSON, nullable=False, default=list)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user = relationship("AppUser", back_populates="preference")


class StarterMealSeed(Base):
    """One row per user whose starter meals were copied.

    The primary key makes a second, concurrent seed fail on insert.
    """

    __tablename__ = "starter_meal_seed"

    user_id = Column(
        Integer,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    meal_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("AppUser", back_populates="starter_seed")
