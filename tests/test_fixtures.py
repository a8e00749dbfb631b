"""
Shared test fixtures and utilities for the MealPlanner test suite.

This module contains the in-memory database setup, factory helpers for users,
catalog meals and planner entries, and the test client wiring that are reused
across multiple test files.
"""

import uuid
from types import SimpleNamespace
from typing import Generator, Iterable, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from domain.models import (
    AppUser,
    Base,
    Meal,
    MealCategory,
    PlannerEntry,
    UserPreference,
    get_db_session,
)


BREAKFAST = settings.breakfast_category_id
LUNCH = settings.lunch_category_id
DINNER = settings.dinner_category_id


# Helper function to generate unique usernames
def unique_username(prefix: str = "user") -> str:
    """Generate unique username using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# =============================================================================
# IN-MEMORY OBJECTS (no database)
# =============================================================================


def make_meal_stub(meal_id: int, category_id: int = BREAKFAST, diet_types=None, name=None):
    """
    Create a lightweight meal object for selector tests.

    Returns:
        SimpleNamespace: Mock meal with the attributes the selector reads.
    """
    return SimpleNamespace(
        meal_id=meal_id,
        name=name or f"Meal {meal_id}",
        category_id=category_id,
        diet_types=list(diet_types or []),
    )


def make_entry_stub(entry_id: int, position: int):
    """Create a mock planner entry with just an id and a position."""
    return SimpleNamespace(entry_id=entry_id, position=position)


# =============================================================================
# DATABASE SESSION FIXTURE FOR INTEGRATION TESTS
# =============================================================================

# One shared in-memory connection so the test client thread sees the same data.
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestSessionLocal = sessionmaker(bind=test_engine, future=True)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a database session for integration tests.

    Each test gets a freshly created schema in an in-memory SQLite database
    that is dropped again after the test completes.

    Yields:
        Session: SQLAlchemy database session
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def api_client(db_session: Session):
    """
    TestClient whose requests use the test session.

    The lifespan is not entered, so no connection to the configured database
    is attempted.
    """
    from fastapi.testclient import TestClient
    from main import app

    def _override():
        yield db_session

    app.dependency_overrides[get_db_session] = _override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# DATABASE FACTORIES
# =============================================================================


def make_categories(db: Session) -> None:
    """Insert the breakfast, lunch and dinner categories."""
    for category_id, name in ((BREAKFAST, "breakfast"), (LUNCH, "lunch"), (DINNER, "dinner")):
        if db.get(MealCategory, category_id) is None:
            db.add(MealCategory(category_id=category_id, name=name))
    db.commit()


def make_user(
    db: Session,
    username: Optional[str] = None,
    diet_types: Optional[List[str]] = None,
    display_name: str = "Sarah Martinez",
) -> AppUser:
    """
    Create and commit a user, optionally with diet preferences.

    Example:
        >>> user = make_user(db_session, diet_types=["vegan"])
        >>> user.diet_types
        ['vegan']
    """
    user = AppUser(username=username or unique_username("sarah"), display_name=display_name)
    db.add(user)
    db.flush()
    if diet_types is not None:
        db.add(UserPreference(user_id=user.user_id, diet_types=list(diet_types)))
    db.commit()
    db.refresh(user)
    return user


def make_system_meal(
    db: Session,
    category_id: int = BREAKFAST,
    diet_types: Optional[Iterable[str]] = None,
    name: Optional[str] = None,
    commit: bool = True,
) -> Meal:
    """Create a system (template) meal in the catalog."""
    meal = Meal(
        name=name or f"Catalog meal {uuid.uuid4().hex[:8]}",
        category_id=category_id,
        ingredients=["rice", "beans"],
        instructions=["Cook.", "Serve."],
        diet_types=list(diet_types or []),
        is_system_meal=True,
    )
    db.add(meal)
    if commit:
        db.commit()
        db.refresh(meal)
    return meal


def make_catalog(db: Session, per_category: int = 25, diet_types_for=None) -> List[Meal]:
    """
    Fill the catalog with ``per_category`` system meals in each category.

    Args:
        diet_types_for: optional callable (index) -> list of diet tags; by
            default meals are untagged.
    """
    make_categories(db)
    meals = []
    for category_id in (BREAKFAST, LUNCH, DINNER):
        for i in range(per_category):
            tags = diet_types_for(i) if diet_types_for else []
            meals.append(
                make_system_meal(
                    db,
                    category_id=category_id,
                    diet_types=tags,
                    name=f"Catalog {category_id}-{i}",
                    commit=False,
                )
            )
    db.commit()
    return meals


def make_planner_entry(
    db: Session,
    day_id: int,
    meal_id: int,
    position: int,
    meal_type: str = "lunch",
    audience: str = "adult",
    is_drink: bool = False,
) -> PlannerEntry:
    """Insert an entry with an explicit position, bypassing append logic."""
    entry = PlannerEntry(
        day_id=day_id,
        meal_id=meal_id,
        meal_type=meal_type,
        audience=audience,
        position=position,
        is_drink=is_drink,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry
