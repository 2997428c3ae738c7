"""
Shared test fixtures.
Every test gets its own in-memory SQLite database so nothing leaks
between tests and no external database is needed.
"""
import pytest
from fastapi.testclient import TestClient

from trip_planner.auth import User, UserStorage
from trip_planner.config import Settings
from trip_planner.database import drop_tables, init_db, init_engine, make_session_factory
from trip_planner.main import create_app
from trip_planner.trip.value_objects import Destination


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", secret_key="test-secret", _env_file=None)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def session():
    engine = init_engine("sqlite://")
    init_db(engine)
    with make_session_factory(engine)() as db_session:
        yield db_session
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def user(session):
    u = User(user_id="u1", username="traveler", email="traveler@mail.com", hashed_password="x")
    UserStorage(session).save(u)
    return u


@pytest.fixture
def make_auth_headers(client):
    def _make(username: str = "traveler", password: str = "password123") -> dict:
        client.post("/api/auth/register", json={
            "username": username,
            "email": f"{username}@mail.com",
            "password": password,
        })
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return _make


@pytest.fixture
def auth_headers(make_auth_headers):
    return make_auth_headers()


@pytest.fixture
def tokyo_kyoto():
    return [
        Destination(city="Tokyo", days_to_stay=3, order=0),
        Destination(city="Kyoto", days_to_stay=None, order=1),
    ]


@pytest.fixture
def trip_payload():
    return {
        "title": "Japan",
        "description": "Spring break",
        "start_date": "2025-01-01T00:00:00",
        "end_date": "2025-01-10T00:00:00",
        "home_city": "San Francisco",
        "destinations": [
            {"city": "Tokyo", "days_to_stay": 3},
            {"city": "Kyoto", "days_to_stay": None},
        ],
    }

