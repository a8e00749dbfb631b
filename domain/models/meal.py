"""
Meal catalog models.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Boolean, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.enums import Audience, MealFormat, MealSourceType


class MealCategory(Base):
    """Meal categories (breakfast, lunch, dinner, ...)"""

    __tablename__ = "meal_category"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, unique=True, nullable=False)

    meals = relationship("Meal", back_populates="category")


class Meal(Base):
    """A recipe or ready meal.

    System meals (``is_system_meal``) have no owner and act as read-only
    templates; starter meals are user-owned copies of them.
    """

    __tablename__ = "meal"

    meal_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("app_user.user_id", ondelete="CASCADE"), nullable=True
    )
    name = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("meal_category.category_id"))
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    image_url = Column(Text)
    servings = Column(Integer, nullable=False, default=1)
    source_url = Column(Text)
    diet_types = Column(JSON, nullable=False, default=list)
    audience = Column(Text, nullable=False, default=Audience.ADULT.value)
    is_drink = Column(Boolean, nullable=False, default=False)
    drink_type = Column(Text)
    is_system_meal = Column(Boolean, nullable=False, default=False)
    is_ready_meal = Column(Boolean, nullable=False, default=False)
    meal_format = Column(Text, nullable=False, default=MealFormat.RECIPE.value)
    meal_source_type = Column(
        Text, nullable=False, default=MealSourceType.SCRATCH.value
    )
    original_meal_id = Column(Integer, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="meals")
    category = relationship("MealCategory", back_populates="meals")
