"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.user_mapper import UserMapper
from domain.mappers.planner_mapper import PlannerMapper

__all__ = ["UserMapper", "PlannerMapper"]
