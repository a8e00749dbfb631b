#!/usr/bin/env python3
"""
Initialize the database and load the system meal catalog.

Creates all tables, the breakfast/lunch/dinner categories, and the system
(template) meals that starter meals are copied from. Loading is idempotent:
system meals are matched by name and category.

Usage:
    python scripts/init_db.py [path/to/system_meals.json]
"""

import json
import sys
import logging
from pathlib import Path
from typing import Iterable, Mapping

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session

from app.config import settings
from domain.enums import Audience, MealFormat
from domain.models import Meal
from repositories import MealCategoryRepository

logger = logging.getLogger("mealplanner.init_db")

DEFAULT_CATALOG = Path(__file__).parent.parent / "data" / "system_meals.json"


def seed_categories(db: Session) -> dict:
    """Ensure the starter categories exist. Returns name -> category_id."""
    repo = MealCategoryRepository(db)
    names = {
        "breakfast": settings.breakfast_category_id,
        "lunch": settings.lunch_category_id,
        "dinner": settings.dinner_category_id,
    }
    for name, category_id in names.items():
        repo.get_or_create(category_id, name)
    db.commit()
    return names


def load_system_meals(db: Session, records: Iterable[Mapping]) -> int:
    """
    Insert system meals that are not present yet.

    Each record needs ``name`` and ``category`` (breakfast/lunch/dinner);
    ``ingredients``, ``instructions``, ``diet_types``, ``servings``,
    ``audience`` and ``is_drink`` are optional. Returns the number inserted.
    """
    categories = seed_categories(db)
    inserted = 0

    for record in records:
        name = (record.get("name") or "").strip()
        category = (record.get("category") or "").strip().lower()
        if not name or category not in categories:
            logger.warning("Skipping catalog record without name/category: %r", record)
            continue

        category_id = categories[category]
        exists = (
            db.query(Meal.meal_id)
            .filter(
                Meal.is_system_meal.is_(True),
                Meal.name == name,
                Meal.category_id == category_id,
            )
            .first()
        )
        if exists:
            continue

        db.add(
            Meal(
                name=name,
                category_id=category_id,
                ingredients=list(record.get("ingredients") or []),
                instructions=list(record.get("instructions") or []),
                servings=int(record.get("servings") or 1),
                diet_types=list(record.get("diet_types") or []),
                audience=record.get("audience") or Audience.ADULT.value,
                is_drink=bool(record.get("is_drink", False)),
                meal_format=MealFormat.RECIPE.value,
                is_system_meal=True,
            )
        )
        inserted += 1

    db.commit()
    logger.info("Loaded %d system meals", inserted)
    return inserted


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    catalog_path = Path(argv[0]) if argv else DEFAULT_CATALOG

    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

    from domain.models import SessionLocal, init_database

    try:
        init_database()
        records = json.loads(catalog_path.read_text(encoding="utf-8"))
        with SessionLocal() as db:
            load_system_meals(db, records)
    except (OSError, ValueError) as e:
        logger.error("Catalog load failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
