from __future__ import annotations

import enum
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ReorderError, ServiceValidationError
from domain.enums import Audience
from domain.models import PlannerDay, PlannerEntry, PlannerWeek
from repositories import (
    MealRepository,
    PlannerDayRepository,
    PlannerEntryRepository,
    PlannerWeekRepository,
    UserRepository,
)
from services.reorder import adjacent_pair, sort_entries, swap_positions

logger = logging.getLogger("mealplanner.planner")


def _value(v: Any) -> Any:
    return v.value if isinstance(v, enum.Enum) else v


class PlannerService:
    """
    Planner grid and entry ordering:
    - a fixed grid of weeks x 7 days per user, created on first access
    - entries appended to a (day, slot, audience, drink) group at the end
    - manual ordering by position, swapped atomically
    """

    # ---------- weeks & days ----------

    @staticmethod
    def ensure_weeks(db: Session, user_id: int) -> List[PlannerWeek]:
        """Return the user's weeks, creating the grid if it does not exist yet"""
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User {user_id} not found")

        week_repo = PlannerWeekRepository(db)
        existing = week_repo.get_by_user(user_id)
        if existing:
            return existing

        try:
            for week_number in range(1, settings.planner_week_count + 1):
                week_repo.add_week_with_days(user_id, week_number)
            db.commit()
        except IntegrityError:
            # another request created the grid first
            db.rollback()
            retried = week_repo.get_by_user(user_id)
            if retried:
                return retried
            raise

        logger.info(
            "planner_weeks_created user_id=%s weeks=%d",
            user_id,
            settings.planner_week_count,
        )
        return week_repo.get_by_user(user_id)

    @staticmethod
    def get_week(db: Session, week_id: int) -> PlannerWeek:
        week = PlannerWeekRepository(db).get_by_id(week_id)
        if week is None:
            raise NotFoundError(f"Planner week {week_id} not found")
        return week

    @staticmethod
    def rename_week(db: Session, week_id: int, week_name: str) -> PlannerWeek:
        name = (week_name or "").strip()
        if not name:
            raise ServiceValidationError("Week name must not be empty")
        week = PlannerService.get_week(db, week_id)
        week.week_name = name
        return PlannerWeekRepository(db).update(week)

    @staticmethod
    def list_days(db: Session, week_id: int) -> List[PlannerDay]:
        PlannerService.get_week(db, week_id)
        return PlannerDayRepository(db).get_by_week(week_id)

    @staticmethod
    def get_day(db: Session, day_id: int) -> PlannerDay:
        day = PlannerDayRepository(db).get_by_id(day_id)
        if day is None:
            raise NotFoundError(f"Planner day {day_id} not found")
        return day

    # ---------- entries ----------

    @staticmethod
    def get_entry(db: Session, entry_id: int) -> PlannerEntry:
        entry = PlannerEntryRepository(db).get_by_id(entry_id)
        if entry is None:
            raise NotFoundError(f"Planner entry {entry_id} not found")
        return entry

    @staticmethod
    def list_day_entries(db: Session, day_id: int) -> List[PlannerEntry]:
        PlannerService.get_day(db, day_id)
        return PlannerEntryRepository(db).get_by_day(day_id)

    @staticmethod
    def list_entries(
        db: Session,
        day_id: int,
        meal_type: str,
        audience: str = Audience.ADULT.value,
        is_drink: bool = False,
    ) -> List[PlannerEntry]:
        """Entries of one group in display order"""
        return PlannerEntryRepository(db).list_group(
            day_id, _value(meal_type), _value(audience), is_drink
        )

    @staticmethod
    def add_entry(
        db: Session,
        day_id: int,
        meal_type: str,
        meal_id: int,
        audience: str = Audience.ADULT.value,
        calories: int = 0,
        is_drink: bool = False,
        drink_type: Optional[str] = None,
    ) -> PlannerEntry:
        """Append a meal to the end of its group"""
        PlannerService.get_day(db, day_id)
        if not MealRepository(db).exists(meal_id):
            raise NotFoundError(f"Meal {meal_id} not found")

        entry_repo = PlannerEntryRepository(db)
        meal_type, audience = _value(meal_type), _value(audience)
        position = entry_repo.count_group(day_id, meal_type, audience, is_drink)

        entry = entry_repo.create(
            PlannerEntry(
                day_id=day_id,
                meal_type=meal_type,
                audience=audience,
                meal_id=meal_id,
                position=position,
                calories=calories,
                is_drink=is_drink,
                drink_type=_value(drink_type),
            )
        )
        logger.info(
            "planner_entry_added entry_id=%s day_id=%s meal_type=%s position=%d",
            entry.entry_id,
            day_id,
            meal_type,
            position,
        )
        return entry

    @staticmethod
    def set_slot_entry(
        db: Session,
        day_id: int,
        meal_type: str,
        meal_id: Optional[int],
        audience: str = Audience.ADULT.value,
        calories: int = 0,
        is_drink: bool = False,
        drink_type: Optional[str] = None,
    ) -> Optional[PlannerEntry]:
        """
        Single-meal slot editing: replace the first entry of the group, insert
        one if the group is empty, or clear the group when ``meal_id`` is None.
        """
        PlannerService.get_day(db, day_id)
        entry_repo = PlannerEntryRepository(db)
        meal_type, audience = _value(meal_type), _value(audience)

        if meal_id is None:
            removed = entry_repo.delete_group(day_id, meal_type, audience, is_drink)
            logger.info(
                "planner_slot_cleared day_id=%s meal_type=%s removed=%d",
                day_id,
                meal_type,
                removed,
            )
            return None

        if not MealRepository(db).exists(meal_id):
            raise NotFoundError(f"Meal {meal_id} not found")

        existing = entry_repo.list_group(day_id, meal_type, audience, is_drink)
        if existing:
            entry = existing[0]
            entry.meal_id = meal_id
            entry.calories = calories
            entry.drink_type = _value(drink_type)
            return entry_repo.update(entry)

        return entry_repo.create(
            PlannerEntry(
                day_id=day_id,
                meal_type=meal_type,
                audience=audience,
                meal_id=meal_id,
                position=0,
                calories=calories,
                is_drink=is_drink,
                drink_type=_value(drink_type),
            )
        )

    @staticmethod
    def delete_entry(db: Session, entry_id: int) -> None:
        """Remove an entry. Remaining positions are left as they are."""
        if not PlannerEntryRepository(db).delete(entry_id):
            raise NotFoundError(f"Planner entry {entry_id} not found")
        logger.info("planner_entry_deleted entry_id=%s", entry_id)

    # ---------- ordering ----------

    @staticmethod
    def update_entry_position(db: Session, entry_id: int, position: int) -> PlannerEntry:
        """Set one entry's position. One step of the client-driven swap."""
        entry = PlannerEntryRepository(db).update_position(entry_id, position)
        if entry is None:
            raise NotFoundError(f"Planner entry {entry_id} not found")
        return entry

    @staticmethod
    def _stage_swap(
        db: Session,
        entry_repo: PlannerEntryRepository,
        entry_a: PlannerEntry,
        entry_b: PlannerEntry,
        use_sentinel: bool,
    ) -> None:
        if use_sentinel:
            swap_positions(
                entry_a,
                entry_b,
                entry_repo.stage_position,
                sentinel=settings.reorder_sentinel_position,
            )
        else:
            entry_a.position, entry_b.position = entry_b.position, entry_a.position
            db.flush()

    @staticmethod
    def _normalize_group(db: Session, entries: List[PlannerEntry]) -> None:
        """Rewrite positions as 0..n-1 in current display order. Only flushes."""
        for idx, entry in enumerate(entries):
            entry.position = idx
        db.flush()

    @staticmethod
    def _load_pair(db: Session, entry_a_id: int, entry_b_id: int) -> Tuple[PlannerEntry, PlannerEntry]:
        entry_a = PlannerService.get_entry(db, entry_a_id)
        entry_b = PlannerService.get_entry(db, entry_b_id)
        if entry_a.entry_id == entry_b.entry_id:
            raise ServiceValidationError("Cannot swap an entry with itself")
        if entry_a.group_key != entry_b.group_key:
            raise ServiceValidationError(
                "Entries belong to different planner groups",
                details={"entry_a_id": entry_a_id, "entry_b_id": entry_b_id},
            )
        return entry_a, entry_b

    @staticmethod
    def swap_entries(
        db: Session,
        entry_a_id: int,
        entry_b_id: int,
        use_sentinel: Optional[bool] = None,
    ) -> List[PlannerEntry]:
        """
        Swap the positions of two entries of the same group in one transaction.

        Either both rows change or neither does. Returns the group in its new
        display order.
        """
        entry_a, entry_b = PlannerService._load_pair(db, entry_a_id, entry_b_id)
        if use_sentinel is None:
            use_sentinel = settings.reorder_use_sentinel

        entry_repo = PlannerEntryRepository(db)
        group = entry_a.group_key
        try:
            PlannerService._stage_swap(db, entry_repo, entry_a, entry_b, use_sentinel)
            db.commit()
        except ReorderError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(
                "planner_swap_failed entry_a=%s entry_b=%s", entry_a_id, entry_b_id
            )
            raise ReorderError(
                details={"entry_a_id": entry_a_id, "entry_b_id": entry_b_id}
            ) from e

        logger.info(
            "planner_entries_swapped entry_a=%s entry_b=%s sentinel=%s",
            entry_a_id,
            entry_b_id,
            use_sentinel,
        )
        return entry_repo.list_group(*group)

    @staticmethod
    def move_entry(db: Session, entry_id: int, direction: str) -> List[PlannerEntry]:
        """
        Move an entry one place up or down within its group.

        A no-op at the edges. Equal positions are first renumbered to the
        current display order so the swap is visible.
        """
        entry = PlannerService.get_entry(db, entry_id)
        entry_repo = PlannerEntryRepository(db)
        group_key = entry.group_key
        group = entry_repo.list_group(*group_key)

        try:
            pair = adjacent_pair(group, entry_id, direction)
        except ValueError as e:
            raise ServiceValidationError(str(e))
        if pair is None:
            return group

        earlier, later = pair
        try:
            if earlier.position == later.position:
                PlannerService._normalize_group(db, sort_entries(group))
            PlannerService._stage_swap(
                db, entry_repo, earlier, later, settings.reorder_use_sentinel
            )
            db.commit()
        except ReorderError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("planner_move_failed entry_id=%s", entry_id)
            raise ReorderError(details={"entry_id": entry_id}) from e

        logger.info("planner_entry_moved entry_id=%s direction=%s", entry_id, direction)
        return entry_repo.list_group(*group_key)

    # ---------- full view ----------

    @staticmethod
    def get_full_planner(db: Session, user_id: int) -> List[Tuple[PlannerWeek, List[PlannerDay], List[PlannerEntry]]]:
        """Weeks with their days and all entries of those days in display order"""
        weeks = PlannerService.ensure_weeks(db, user_id)
        day_repo = PlannerDayRepository(db)
        entry_repo = PlannerEntryRepository(db)

        result = []
        for week in weeks:
            days = day_repo.get_by_week(week.week_id)
            entries = entry_repo.get_by_day_ids(d.day_id for d in days)
            result.append((week, days, entries))
        return result
