"""
Weekly planner models: weeks, days and the meal entries placed in them.
"""

from sqlalchemy import (
    Column,
    Text,
    ForeignKey,
    Integer,
    Boolean,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from domain.models.database import Base
from domain.enums import Audience


class PlannerWeek(Base):
    """A named week in a user's planner grid"""

    __tablename__ = "planner_week"
    __table_args__ = (
        UniqueConstraint("user_id", "week_number", name="planner_week_user_week_unique"),
    )

    week_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    week_number = Column(Integer, nullable=False)
    week_name = Column(Text, nullable=False)

    user = relationship("AppUser", back_populates="planner_weeks")
    days = relationship(
        "PlannerDay",
        back_populates="week",
        cascade="all, delete-orphan",
        order_by="PlannerDay.day_of_week",
    )


class PlannerDay(Base):
    """One day (0 = Monday) of a planner week"""

    __tablename__ = "planner_day"
    __table_args__ = (
        UniqueConstraint("week_id", "day_of_week", name="planner_day_week_day_unique"),
    )

    day_id = Column(Integer, primary_key=True, autoincrement=True)
    week_id = Column(
        Integer,
        ForeignKey("planner_week.week_id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week = Column(Integer, nullable=False)

    week = relationship("PlannerWeek", back_populates="days")
    entries = relationship(
        "PlannerEntry", back_populates="day", cascade="all, delete-orphan"
    )


class PlannerEntry(Base):
    """A meal placed in a day slot.

    ``position`` orders entries within the same
    (day_id, meal_type, audience, is_drink) group. It is not unique;
    equal positions fall back to entry_id order.
    """

    __tablename__ = "planner_entry"
    __table_args__ = (
        Index(
            "ix_planner_entry_group",
            "day_id",
            "meal_type",
            "audience",
            "is_drink",
        ),
    )

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    day_id = Column(
        Integer,
        ForeignKey("planner_day.day_id", ondelete="CASCADE"),
        nullable=False,
    )
    meal_type = Column(Text, nullable=False)
    audience = Column(Text, nullable=False, default=Audience.ADULT.value)
    meal_id = Column(
        Integer, ForeignKey("meal.meal_id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)
    calories = Column(Integer, default=0)
    is_drink = Column(Boolean, nullable=False, default=False)
    drink_type = Column(Text)

    day = relationship("PlannerDay", back_populates="entries")
    meal = relationship("Meal")

    @property
    def group_key(self) -> tuple:
        return (self.day_id, self.meal_type, self.audience, bool(self.is_drink))
