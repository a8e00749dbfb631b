"""
HTTP endpoint tests through FastAPI's TestClient.

Requests run against the in-memory test database via a dependency override
of get_db_session.
"""

from sqlalchemy.orm import Session

from test_fixtures import (
    LUNCH,
    api_client,
    db_session,
    make_catalog,
    make_system_meal,
)
from app.config import settings


def _create_user(client, username="sarah"):
    r = client.post("/users", json={"username": username, "display_name": "Sarah Martinez"})
    assert r.status_code == 201
    return r.json()["user_id"]


def _first_day_id(client, user_id):
    weeks = client.get("/planner/weeks", params={"user_id": user_id}).json()
    days = client.get(f"/planner/weeks/{weeks[0]['week_id']}/days").json()
    return days[0]["day_id"]


# =============================================================================
# HEALTH & USERS
# =============================================================================


def test_health_check(api_client):
    r = api_client.get("/health-check")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == settings.app_name
    assert "X-Request-ID" in r.headers


def test_user_lifecycle(api_client):
    """
    Test user creation, diet preferences and deletion.

    Verifies:
    - POST /users returns 201 with unset flags
    - PUT diet preferences cleans blanks and duplicates
    - DELETE removes the user, GET then returns 404
    """
    user_id = _create_user(api_client)

    r = api_client.get(f"/users/{user_id}")
    assert r.status_code == 200
    assert r.json()["starter_meals_loaded"] is False
    assert r.json()["onboarding_completed"] is False

    r = api_client.put(
        f"/users/{user_id}/diet-preferences",
        json={"diet_types": ["vegan", " ", "vegan", "keto"]},
    )
    assert r.status_code == 200
    assert r.json()["diet_types"] == ["vegan", "keto"]

    r = api_client.delete(f"/users/{user_id}")
    assert r.status_code == 200
    assert api_client.get(f"/users/{user_id}").status_code == 404


def test_create_user_conflict(api_client):
    _create_user(api_client, "emma")
    r = api_client.post("/users", json={"username": "emma"})

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"


def test_onboarding_seeds_starter_meals(api_client, db_session: Session):
    """
    Test POST /users/{id}/onboarding.

    Verifies:
    - Starter meals are inserted and reported
    - A second onboarding call inserts nothing
    """
    make_catalog(db_session, per_category=22)
    user_id = _create_user(api_client)

    r = api_client.post(f"/users/{user_id}/onboarding", json={"diet_types": []})
    assert r.status_code == 200
    body = r.json()
    assert body["starter_meals_inserted"] == 63
    assert body["starter_meals_loaded"] is True
    assert body["user"]["onboarding_completed"] is True

    r = api_client.post(f"/users/{user_id}/onboarding")
    assert r.json()["starter_meals_inserted"] == 0


# =============================================================================
# MEALS & STARTER MEALS
# =============================================================================


def test_starter_meals_preview_and_preload(api_client, db_session: Session):
    make_catalog(db_session, per_category=25)
    user_id = _create_user(api_client)

    r = api_client.get("/starter-meals", params={"user_id": user_id})
    assert r.status_code == 200
    preview = r.json()
    assert [len(preview[k]) for k in ("breakfast", "lunch", "dinner")] == [21, 21, 21]

    r = api_client.post("/starter-meals/preload", params={"user_id": user_id})
    assert r.status_code == 200
    assert r.json()["inserted"] == 63

    r = api_client.post("/starter-meals/preload", params={"user_id": user_id})
    assert r.json()["inserted"] == 0

    r = api_client.get("/meals", params={"user_id": user_id, "source_type": "starter"})
    assert r.status_code == 200
    meals = r.json()
    assert len(meals) == 63
    assert all(m["user_id"] == user_id for m in meals)

    r = api_client.get(f"/meals/{meals[0]['meal_id']}")
    assert r.status_code == 200
    assert r.json()["original_meal_id"] is not None


def test_starter_meals_unknown_user(api_client):
    assert api_client.get("/starter-meals", params={"user_id": 77}).status_code == 404
    assert api_client.post("/starter-meals/preload", params={"user_id": 77}).status_code == 404


# =============================================================================
# PLANNER
# =============================================================================


def test_planner_weeks_and_rename(api_client):
    user_id = _create_user(api_client)

    weeks = api_client.get("/planner/weeks", params={"user_id": user_id}).json()
    assert len(weeks) == settings.planner_week_count

    r = api_client.patch(f"/planner/weeks/{weeks[0]['week_id']}", json={"week_name": "Prep week"})
    assert r.status_code == 200
    assert r.json()["week_name"] == "Prep week"

    days = api_client.get(f"/planner/weeks/{weeks[0]['week_id']}/days").json()
    assert [d["day_of_week"] for d in days] == list(range(7))


def test_planner_add_swap_move_delete(api_client, db_session: Session):
    """
    Test the entry ordering endpoints end to end.

    Verifies:
    - Appended entries get positions 0, 1, 2
    - POST /planner/entries/swap swaps two entries
    - POST /planner/entries/{id}/move moves one place
    - DELETE leaves the remaining positions untouched
    """
    meal = make_system_meal(db_session, category_id=LUNCH)
    user_id = _create_user(api_client)
    day_id = _first_day_id(api_client, user_id)

    ids = []
    for _ in range(3):
        r = api_client.post(
            f"/planner/days/{day_id}/items",
            json={"meal_type": "lunch", "meal_id": meal.meal_id},
        )
        assert r.status_code == 201
        ids.append(r.json()["entry_id"])
    e10, e11, e12 = ids

    r = api_client.post("/planner/entries/swap", json={"entry_a_id": e12, "entry_b_id": e11})
    assert r.status_code == 200
    assert [e["entry_id"] for e in r.json()["entries"]] == [e10, e12, e11]

    r = api_client.post(f"/planner/entries/{e11}/move", params={"direction": "up"})
    assert r.status_code == 200
    assert [e["entry_id"] for e in r.json()["entries"]] == [e10, e11, e12]

    assert api_client.delete(f"/planner/entries/{e11}").status_code == 204

    r = api_client.get(
        f"/planner/days/{day_id}/entries/group", params={"meal_type": "lunch"}
    )
    assert [(e["entry_id"], e["position"]) for e in r.json()] == [(e10, 0), (e12, 2)]


def test_planner_three_step_client_protocol(api_client, db_session: Session):
    """
    Test the single-row PATCH used by clients that swap in three calls.

    Verifies:
    - Sentinel, then B to A's old position, then A to B's old position
    - Display order afterwards is [10, 12, 11]
    """
    meal = make_system_meal(db_session, category_id=LUNCH)
    user_id = _create_user(api_client)
    day_id = _first_day_id(api_client, user_id)
    ids = [
        api_client.post(
            f"/planner/days/{day_id}/items",
            json={"meal_type": "lunch", "meal_id": meal.meal_id},
        ).json()["entry_id"]
        for _ in range(3)
    ]
    e10, e11, e12 = ids

    for entry_id, position in ((e12, -1), (e11, 2), (e12, 1)):
        r = api_client.patch(f"/planner/entries/{entry_id}", json={"position": position})
        assert r.status_code == 200

    r = api_client.get(f"/planner/days/{day_id}/entries")
    assert [e["entry_id"] for e in r.json()] == [e10, e12, e11]


def test_planner_set_slot_and_full_view(api_client, db_session: Session):
    meal = make_system_meal(db_session, category_id=LUNCH)
    user_id = _create_user(api_client)
    day_id = _first_day_id(api_client, user_id)

    r = api_client.put(
        f"/planner/days/{day_id}/entries",
        json={"meal_type": "dinner", "meal_id": meal.meal_id, "calories": 600},
    )
    assert r.status_code == 200
    assert r.json()["calories"] == 600

    full = api_client.get("/planner/full", params={"user_id": user_id}).json()
    assert len(full) == settings.planner_week_count
    first_day = full[0]["days"][0]
    assert first_day["day_id"] == day_id
    assert [e["meal_type"] for e in first_day["entries"]] == ["dinner"]

    r = api_client.put(
        f"/planner/days/{day_id}/entries", json={"meal_type": "dinner", "meal_id": None}
    )
    assert r.status_code == 200
    assert r.json() is None
