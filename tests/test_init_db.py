"""
Tests for the catalog loading script.
"""

import json
from pathlib import Path

from sqlalchemy.orm import Session

from test_fixtures import BREAKFAST, db_session
from domain.models import Meal, MealCategory
from scripts.init_db import DEFAULT_CATALOG, load_system_meals


def test_bundled_catalog_loads_once(db_session: Session):
    """
    Test load_system_meals() with the bundled catalog.

    Verifies:
    - Categories are created
    - Every record becomes a system meal
    - Loading again inserts nothing
    """
    records = json.loads(Path(DEFAULT_CATALOG).read_text(encoding="utf-8"))

    inserted = load_system_meals(db_session, records)

    assert inserted == len(records)
    assert db_session.query(MealCategory).count() == 3
    assert db_session.query(Meal).filter(Meal.is_system_meal.is_(True)).count() == len(records)
    assert load_system_meals(db_session, records) == 0


def test_invalid_records_are_skipped(db_session: Session):
    records = [
        {"name": "Porridge", "category": "Breakfast", "diet_types": ["vegan"]},
        {"name": "", "category": "lunch"},
        {"name": "Midnight snack", "category": "supper"},
    ]

    assert load_system_meals(db_session, records) == 1
    meal = db_session.query(Meal).one()
    assert meal.category_id == BREAKFAST
    assert meal.diet_types == ["vegan"]
    assert meal.user_id is None
