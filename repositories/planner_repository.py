"""
Planner Repository - Data access layer for planner weeks, days and entries
"""

from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import PlannerWeek, PlannerDay, PlannerEntry


class PlannerWeekRepository(BaseRepository[PlannerWeek]):
    """Repository for planner weeks"""

    def __init__(self, db: Session):
        super().__init__(db, PlannerWeek)

    def get_by_user(self, user_id: int) -> List[PlannerWeek]:
        """Weeks of a user ordered by week number"""
        return (
            self.db.query(PlannerWeek)
            .filter(PlannerWeek.user_id == user_id)
            .order_by(PlannerWeek.week_number)
            .all()
        )

    def add_week_with_days(self, user_id: int, week_number: int) -> PlannerWeek:
        """Stage a week and its seven days. Only flushes."""
        week = PlannerWeek(
            user_id=user_id, week_number=week_number, week_name=f"Week {week_number}"
        )
        week.days = [PlannerDay(day_of_week=d) for d in range(7)]
        return self.add(week)


class PlannerDayRepository(BaseRepository[PlannerDay]):
    """Repository for planner days"""

    def __init__(self, db: Session):
        super().__init__(db, PlannerDay)

    def get_by_week(self, week_id: int) -> List[PlannerDay]:
        return (
            self.db.query(PlannerDay)
            .filter(PlannerDay.week_id == week_id)
            .order_by(PlannerDay.day_of_week)
            .all()
        )


class PlannerEntryRepository(BaseRepository[PlannerEntry]):
    """Repository for planner entries.

    Every list returned here is in display order: position ascending, then
    entry_id ascending.
    """

    def __init__(self, db: Session):
        super().__init__(db, PlannerEntry)

    def _group_query(self, day_id: int, meal_type: str, audience: str, is_drink: bool):
        return self.db.query(PlannerEntry).filter(
            PlannerEntry.day_id == day_id,
            PlannerEntry.meal_type == meal_type,
            PlannerEntry.audience == audience,
            PlannerEntry.is_drink == bool(is_drink),
        )

    def list_group(self, day_id: int, meal_type: str, audience: str, is_drink: bool) -> List[PlannerEntry]:
        """Entries of one (day, slot, audience, drink) group"""
        return (
            self._group_query(day_id, meal_type, audience, is_drink)
            .order_by(PlannerEntry.position, PlannerEntry.entry_id)
            .all()
        )

    def count_group(self, day_id: int, meal_type: str, audience: str, is_drink: bool) -> int:
        return (
            self._group_query(day_id, meal_type, audience, is_drink)
            .with_entities(func.count(PlannerEntry.entry_id))
            .scalar()
            or 0
        )

    def delete_group(self, day_id: int, meal_type: str, audience: str, is_drink: bool) -> int:
        count = self._group_query(day_id, meal_type, audience, is_drink).delete(
            synchronize_session="fetch"
        )
        self.db.commit()
        return count

    def get_by_day_ids(self, day_ids: Iterable[int]) -> List[PlannerEntry]:
        ids = list(day_ids)
        if not ids:
            return []
        return (
            self.db.query(PlannerEntry)
            .filter(PlannerEntry.day_id.in_(ids))
            .order_by(PlannerEntry.day_id, PlannerEntry.position, PlannerEntry.entry_id)
            .all()
        )

    def get_by_day(self, day_id: int) -> List[PlannerEntry]:
        return self.get_by_day_ids([day_id])

    def update_position(self, entry_id: int, position: int) -> Optional[PlannerEntry]:
        """Single-row position update, committed on its own"""
        entry = self.get_by_id(entry_id)
        if entry is None:
            return None
        entry.position = position
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def stage_position(self, entry_id: int, position: int) -> None:
        """Position update inside a caller-owned transaction. Only flushes."""
        entry = self.get_by_id(entry_id)
        if entry is None:
            raise LookupError(f"Planner entry {entry_id} vanished during update")
        entry.position = position
        self.db.flush()
