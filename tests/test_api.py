from datetime import datetime, timedelta, timezone

import pytest
from conftest import YEAR
from httpx import ASGITransport, AsyncClient

from achievements.config import Settings
from achievements.main import create_app
from achievements.models import Grade
from achievements.security import issue_student_token, student_id_from_token

ADMIN_TOKEN = "run-secret"


@pytest.fixture(name="config")
def config_fixture():
    return Settings(SECRET_KEY="test-secret", ADMIN_TOKEN=ADMIN_TOKEN, WORKER_COUNT=2, LOG_LEVEL="WARNING")


@pytest.fixture(name="client")
async def client_fixture(config, store):
    app = create_app(config=config, store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def _auth(config, student_id="s1"):
    token = issue_student_token(student_id, config)
    return {"Authorization": f"Bearer {token}"}


EVENT = {"eventName": "downloaded_material", "studentId": "s1", "appId": "test-app", "academicYear": YEAR}


async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_log_event_requires_authentication(client: AsyncClient):
    response = await client.post("/events", json=EVENT)
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "unauthenticated"


async def test_log_event_rejects_bad_token(client: AsyncClient):
    response = await client.post("/events", json=EVENT, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_log_event_for_another_student(client: AsyncClient, config):
    response = await client.post("/events", json=EVENT, headers=_auth(config, "s2"))
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "permission-denied"


async def test_log_event_missing_fields(client: AsyncClient, config):
    response = await client.post("/events", json={"studentId": "s1"}, headers=_auth(config))
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid-argument"


async def test_log_event(client: AsyncClient, config, store):
    response = await client.post("/events", json=EVENT, headers=_auth(config))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Event logged successfully."
    (row,) = store.list_user_events(YEAR, "s1")
    assert row.id == body["event_id"]


async def test_catalog(client: AsyncClient):
    response = await client.get("/badges/catalog")

    assert response.status_code == 200
    catalog = {entry["id"]: entry for entry in response.json()}
    assert len(catalog) == 18
    assert catalog["high_flyer"]["xp"] == 50
    assert catalog["perfect_attendance_month"]["dedup"] == "rearm"


async def test_run_requires_admin_token(client: AsyncClient):
    response = await client.post("/badges/run")
    assert response.status_code == 403

    response = await client.post("/badges/run", headers={"X-Admin-Token": "wrong"})
    assert response.status_code == 403


async def test_run_badge_check(client: AsyncClient, seed, student, store):
    student()
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    seed(Grade(id="g1", student_id="s1", subject="Math", type="test", grade="19,5", date=yesterday))

    response = await client.post("/badges/run", headers={"X-Admin-Token": ADMIN_TOKEN})

    assert response.status_code == 200
    assert response.json() == {
        "academic_year_id": YEAR,
        "processed": 1,
        "succeeded": 1,
        "failed": [],
        "awarded": 1,
    }
    assert store.get_student(YEAR, "s1").total_xp == 50


async def test_run_disabled_without_admin_token(store):
    app = create_app(config=Settings(ADMIN_TOKEN="", LOG_LEVEL="WARNING"), store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/badges/run", headers={"X-Admin-Token": "anything"})

    assert response.status_code == 404


def test_student_token_round_trip(config):
    token = issue_student_token("s1", config)

    assert student_id_from_token(token, config) == "s1"


def test_expired_or_foreign_tokens_are_rejected(config):
    expired = issue_student_token("s1", config, expires_in=timedelta(seconds=-5))
    foreign = issue_student_token("s1", Settings(SECRET_KEY="another-key"))

    assert student_id_from_token(expired, config) is None
    assert student_id_from_token(foreign, config) is None
