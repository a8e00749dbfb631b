"""
Tests for the repository classes.

This test suite validates the data access layer directly:
- UserRepository: creation, conflict, seed flag, row lock query
- PreferenceRepository: diet type storage
- StarterSeedRepository: one marker per user
- MealRepository: catalog queries and copies into a user's collection
- PlannerEntryRepository: group listing order, counting, position updates
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from test_fixtures import (
    BREAKFAST,
    DINNER,
    LUNCH,
    db_session,
    make_categories,
    make_planner_entry,
    make_system_meal,
    make_user,
)
from app.exceptions import ConflictError
from domain.models import Meal
from repositories import (
    MealCategoryRepository,
    MealRepository,
    PlannerEntryRepository,
    PlannerWeekRepository,
    PreferenceRepository,
    StarterSeedRepository,
    UserRepository,
)


# =============================================================================
# USER REPOSITORY TESTS
# =============================================================================


def test_user_repository_create_and_lookup(db_session: Session):
    repo = UserRepository(db_session)

    user = repo.create_user("raj", "Raj Patel")

    assert repo.get_by_username("raj").user_id == user.user_id
    assert repo.get_for_update(user.user_id).user_id == user.user_id
    assert repo.get_for_update(999) is None


def test_user_repository_duplicate_username(db_session: Session):
    repo = UserRepository(db_session)
    repo.create_user("michael")

    with pytest.raises(ConflictError):
        repo.create_user("michael")


def test_user_repository_seed_flag(db_session: Session):
    repo = UserRepository(db_session)
    user = make_user(db_session)

    assert repo.has_starter_meals_loaded(user.user_id) is False
    assert repo.has_starter_meals_loaded(424242) is False

    repo.mark_starter_meals_loaded(user)
    db_session.commit()

    assert repo.has_starter_meals_loaded(user.user_id) is True


# =============================================================================
# PREFERENCE / SEED MARKER TESTS
# =============================================================================


def test_preference_repository_diet_types(db_session: Session):
    repo = PreferenceRepository(db_session)
    user = make_user(db_session)

    assert repo.get_diet_types(user.user_id) == set()

    repo.set_diet_types(user.user_id, ["vegan", "gluten-free"])
    db_session.commit()
    assert repo.get_diet_types(user.user_id) == {"vegan", "gluten-free"}

    repo.set_diet_types(user.user_id, [])
    db_session.commit()
    assert repo.get_diet_types(user.user_id) == set()


def test_starter_seed_marker_is_unique(db_session: Session):
    """
    Test StarterSeedRepository.add_marker().

    Verifies:
    - First marker inserts
    - A second marker for the same user raises IntegrityError
    """
    user = make_user(db_session)
    user_id = user.user_id
    StarterSeedRepository(db_session).add_marker(user_id)
    db_session.commit()
    db_session.expunge_all()

    with pytest.raises(IntegrityError):
        StarterSeedRepository(db_session).add_marker(user_id)
    db_session.rollback()


# =============================================================================
# MEAL REPOSITORY TESTS
# =============================================================================


def test_get_system_meals_by_category(db_session: Session):
    make_categories(db_session)
    breakfast = make_system_meal(db_session, category_id=BREAKFAST)
    lunch = make_system_meal(db_session, category_id=LUNCH)
    make_system_meal(db_session, category_id=DINNER)
    user = make_user(db_session)
    db_session.add(Meal(name="Own meal", category_id=BREAKFAST, user_id=user.user_id))
    db_session.commit()

    meals = MealRepository(db_session).get_system_meals_by_category([BREAKFAST, LUNCH])

    assert [m.meal_id for m in meals] == [breakfast.meal_id, lunch.meal_id]
    assert MealRepository(db_session).get_system_meals_by_category([]) == []


def test_copy_to_user(db_session: Session):
    """
    Test MealRepository.copy_to_user().

    Verifies:
    - The copy gets a new id and belongs to the user
    - Content fields are carried over
    - The system meal is unchanged
    """
    make_categories(db_session)
    source = make_system_meal(db_session, category_id=DINNER, diet_types=["keto"], name="Steak")
    user = make_user(db_session)
    repo = MealRepository(db_session)

    copy = repo.copy_to_user(user.user_id, source)
    db_session.commit()

    assert copy.meal_id != source.meal_id
    assert copy.user_id == user.user_id
    assert copy.name == "Steak"
    assert copy.diet_types == ["keto"]
    assert copy.ingredients == source.ingredients
    assert copy.original_meal_id == source.meal_id
    assert copy.meal_source_type == "starter"
    assert copy.is_system_meal is False
    assert source.is_system_meal is True
    assert source.user_id is None
    assert [m.meal_id for m in repo.get_by_user(user.user_id, "starter")] == [copy.meal_id]


def test_category_get_or_create(db_session: Session):
    repo = MealCategoryRepository(db_session)

    created = repo.get_or_create(BREAKFAST, "breakfast")
    again = repo.get_or_create(BREAKFAST, "breakfast")

    assert created is again
    assert repo.get_by_name("breakfast").category_id == BREAKFAST


# =============================================================================
# PLANNER REPOSITORY TESTS
# =============================================================================


def _day_and_meal(db: Session):
    user = make_user(db)
    week = PlannerWeekRepository(db).add_week_with_days(user.user_id, 1)
    db.commit()
    meal = make_system_meal(db, category_id=LUNCH)
    return week.days[0].day_id, meal.meal_id


def test_list_group_order_and_isolation(db_session: Session):
    """
    Test PlannerEntryRepository.list_group().

    Verifies:
    - Entries are sorted by position, then entry_id
    - Other meal types, audiences and drink entries are not included
    """
    day_id, meal_id = _day_and_meal(db_session)
    late = make_planner_entry(db_session, day_id, meal_id, position=5)
    tie_a = make_planner_entry(db_session, day_id, meal_id, position=1)
    tie_b = make_planner_entry(db_session, day_id, meal_id, position=1)
    make_planner_entry(db_session, day_id, meal_id, position=0, meal_type="dinner")
    make_planner_entry(db_session, day_id, meal_id, position=0, audience="child")
    make_planner_entry(db_session, day_id, meal_id, position=0, is_drink=True)

    repo = PlannerEntryRepository(db_session)
    group = repo.list_group(day_id, "lunch", "adult", False)

    assert [e.entry_id for e in group] == [tie_a.entry_id, tie_b.entry_id, late.entry_id]
    assert repo.count_group(day_id, "lunch", "adult", False) == 3
    assert repo.count_group(day_id, "lunch", "adult", True) == 1
    assert len(repo.get_by_day(day_id)) == 6


def test_update_and_stage_position(db_session: Session):
    day_id, meal_id = _day_and_meal(db_session)
    entry = make_planner_entry(db_session, day_id, meal_id, position=0)
    repo = PlannerEntryRepository(db_session)

    assert repo.update_position(entry.entry_id, 7).position == 7
    assert repo.update_position(999, 1) is None

    repo.stage_position(entry.entry_id, 3)
    db_session.rollback()
    assert repo.get_by_id(entry.entry_id).position == 7

    with pytest.raises(LookupError):
        repo.stage_position(999, 1)


def test_delete_group(db_session: Session):
    day_id, meal_id = _day_and_meal(db_session)
    for pos in range(3):
        make_planner_entry(db_session, day_id, meal_id, position=pos)
    make_planner_entry(db_session, day_id, meal_id, position=0, meal_type="dinner")

    repo = PlannerEntryRepository(db_session)
    removed = repo.delete_group(day_id, "lunch", "adult", False)

    assert removed == 3
    assert repo.count_group(day_id, "dinner", "adult", False) == 1
