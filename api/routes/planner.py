from __future__ import annotations

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from domain.enums import Audience, MealType
from domain.mappers import PlannerMapper
from domain.models import get_db_session
from domain.schemas.plan_schemas import (
    AddEntryRequest,
    FullPlannerWeek,
    PlannerDayResponse,
    PlannerEntryResponse,
    PlannerWeekResponse,
    PositionUpdateRequest,
    SetSlotEntryRequest,
    SwapEntriesRequest,
    SwapEntriesResponse,
    WeekRenameRequest,
)
from services.planner_service import PlannerService
from api.responses import ERROR_RESPONSES

router = APIRouter(prefix="/planner", tags=["Meal Planner"], responses=ERROR_RESPONSES)
logger = logging.getLogger("mealplanner.api.planner")


def _entries(entries) -> List[PlannerEntryResponse]:
    return [PlannerEntryResponse.model_validate(e) for e in entries]


# ---------- weeks & days ----------


@router.get("/weeks", response_model=List[PlannerWeekResponse])
def list_weeks(
    user_id: int = Query(..., description="User ID to fetch weeks for"),
    db: Session = Depends(get_db_session),
):
    """List the user's planner weeks, creating the grid on first access."""
    weeks = PlannerService.ensure_weeks(db, user_id)
    return [PlannerWeekResponse.model_validate(w) for w in weeks]


@router.patch("/weeks/{week_id}", response_model=PlannerWeekResponse)
def rename_week(week_id: int, body: WeekRenameRequest, db: Session = Depends(get_db_session)):
    week = PlannerService.rename_week(db, week_id, body.week_name)
    return PlannerWeekResponse.model_validate(week)


@router.get("/weeks/{week_id}/days", response_model=List[PlannerDayResponse])
def list_days(week_id: int, db: Session = Depends(get_db_session)):
    days = PlannerService.list_days(db, week_id)
    return [PlannerDayResponse.model_validate(d) for d in days]


@router.get("/full", response_model=List[FullPlannerWeek])
def get_full_planner(
    user_id: int = Query(..., description="User ID to fetch the planner for"),
    db: Session = Depends(get_db_session),
):
    """All weeks with days and entries, entries in display order."""
    return [
        PlannerMapper.to_full_week(week, days, entries)
        for week, days, entries in PlannerService.get_full_planner(db, user_id)
    ]


# ---------- entries ----------


@router.get("/days/{day_id}/entries", response_model=List[PlannerEntryResponse])
def list_day_entries(day_id: int, db: Session = Depends(get_db_session)):
    """
    All entries of a day.

    Within each (meal_type, audience, is_drink) group entries are ordered by
    position, then entry_id.
    """
    return _entries(PlannerService.list_day_entries(db, day_id))


@router.get("/days/{day_id}/entries/group", response_model=List[PlannerEntryResponse])
def list_group_entries(
    day_id: int,
    meal_type: MealType = Query(...),
    audience: Audience = Query(Audience.ADULT),
    is_drink: bool = Query(False),
    db: Session = Depends(get_db_session),
):
    PlannerService.get_day(db, day_id)
    return _entries(PlannerService.list_entries(db, day_id, meal_type, audience, is_drink))


@router.post(
    "/days/{day_id}/items",
    response_model=PlannerEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_entry(day_id: int, body: AddEntryRequest, db: Session = Depends(get_db_session)):
    """Append a meal at the end of its slot group."""
    entry = PlannerService.add_entry(
        db,
        day_id,
        body.meal_type,
        body.meal_id,
        audience=body.audience,
        calories=body.calories,
        is_drink=body.is_drink,
        drink_type=body.drink_type,
    )
    return PlannerEntryResponse.model_validate(entry)


@router.put("/days/{day_id}/entries", response_model=Optional[PlannerEntryResponse])
def set_slot_entry(day_id: int, body: SetSlotEntryRequest, db: Session = Depends(get_db_session)):
    """Set the single meal of a slot, or clear the slot when meal_id is null."""
    entry = PlannerService.set_slot_entry(
        db,
        day_id,
        body.meal_type,
        body.meal_id,
        audience=body.audience,
        calories=body.calories,
        is_drink=body.is_drink,
        drink_type=body.drink_type,
    )
    return PlannerEntryResponse.model_validate(entry) if entry else None


@router.patch("/entries/{entry_id}", response_model=PlannerEntryResponse)
def update_entry_position(
    entry_id: int, body: PositionUpdateRequest, db: Session = Depends(get_db_session)
):
    """
    Set one entry's position.

    Clients that swap with three of these calls (sentinel, then the two real
    positions) can leave the first entry parked at the sentinel if a later
    call fails. Prefer ``POST /planner/entries/swap``.
    """
    entry = PlannerService.update_entry_position(db, entry_id, body.position)
    return PlannerEntryResponse.model_validate(entry)


@router.post("/entries/swap", response_model=SwapEntriesResponse)
def swap_entries(body: SwapEntriesRequest, db: Session = Depends(get_db_session)):
    """Swap two entries of the same group atomically."""
    group = PlannerService.swap_entries(db, body.entry_a_id, body.entry_b_id)
    return SwapEntriesResponse(entries=_entries(group), message="Entries reordered.")


@router.post("/entries/{entry_id}/move", response_model=SwapEntriesResponse)
def move_entry(
    entry_id: int,
    direction: Literal["up", "down"] = Query(...),
    db: Session = Depends(get_db_session),
):
    """Move an entry one place up or down within its group."""
    group = PlannerService.move_entry(db, entry_id, direction)
    return SwapEntriesResponse(entries=_entries(group))


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(entry_id: int, db: Session = Depends(get_db_session)):
    PlannerService.delete_entry(db, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
