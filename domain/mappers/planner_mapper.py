"""
Planner domain mappers.
Handles transformation between ORM models and DTOs for the planner grid.
"""

from collections import defaultdict
from typing import List

from domain.models import PlannerDay, PlannerEntry, PlannerWeek
from domain.schemas.plan_schemas import (
    FullPlannerWeek,
    PlannerDayWithEntries,
    PlannerEntryResponse,
)


class PlannerMapper:
    """Mapper for planner transformations."""

    @staticmethod
    def to_full_week(
        week: PlannerWeek, days: List[PlannerDay], entries: List[PlannerEntry]
    ) -> FullPlannerWeek:
        """
        Nest entries under their days.

        ``entries`` are expected in display order; that order is kept per day.
        """
        by_day = defaultdict(list)
        for entry in entries:
            by_day[entry.day_id].append(PlannerEntryResponse.model_validate(entry))

        return FullPlannerWeek(
            week_id=week.week_id,
            user_id=week.user_id,
            week_number=week.week_number,
            week_name=week.week_name,
            days=[
                PlannerDayWithEntries(
                    day_id=day.day_id,
                    week_id=day.week_id,
                    day_of_week=day.day_of_week,
                    entries=by_day.get(day.day_id, []),
                )
                for day in days
            ],
        )
