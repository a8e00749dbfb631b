"""API routes package"""

from . import users, meals, planner, health

__all__ = ["users", "meals", "planner", "health"]
