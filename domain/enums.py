"""
Domain enums for the meal planner.
Contains all enumeration types used across the domain models.
"""

import enum


class MealType(str, enum.Enum):
    """Planner slot a meal is eaten in"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


class Audience(str, enum.Enum):
    """Who a meal or planner entry is meant for"""

    ADULT = "adult"
    CHILD = "child"
    BABY = "baby"


class DrinkType(str, enum.Enum):
    """Kind of drink for drink entries"""

    SOFT = "soft"
    ALCOHOL = "alcohol"


class MealSourceType(str, enum.Enum):
    """Where a user-owned meal came from"""

    SCRATCH = "scratch"
    STARTER = "starter"
    TEMPLATE = "template"
    IMPORTED = "imported"


class MealFormat(str, enum.Enum):
    """How a meal is described"""

    RECIPE = "recipe"
    READY_MEAL = "ready_meal"
    GROUPED = "grouped"
