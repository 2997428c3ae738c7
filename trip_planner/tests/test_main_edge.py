from fastapi.testclient import TestClient

import trip_planner.main as main_mod
from trip_planner.config import Settings


def test_openapi_schema(client):
    schema = client.app.openapi()
    assert isinstance(schema, dict)
    assert "/api/trips/" in schema["paths"]
    assert "/api/itinerary-items/{item_id}/move" in schema["paths"]


def test_root_and_health(client):
    assert client.get("/").json()["docs"] == "/docs"
    assert client.get("/health").json() == {"status": "healthy"}


def test_lifespan_stores_settings(client, settings):
    assert client.app.state.settings is settings
    assert client.app.state.session_factory is not None


def test_main_run_block(monkeypatch):
    # Patch uvicorn.run to avoid actually running the server
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("SECRET_KEY", "k")
    monkeypatch.setenv("PORT", "9001")
    called = {}

    def fake_run(app, host, port):
        called['ran'] = (app, host, port)

    monkeypatch.setattr("uvicorn.run", fake_run)
    main_mod.main()

    app, host, port = called['ran']
    assert host == "127.0.0.1"
    assert port == 9001


def test_cors_origins_come_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("SECRET_KEY", "k")
    monkeypatch.setenv("CORS_ORIGINS", '["https://planner.test"]')

    with TestClient(main_mod.create_app()) as client:
        allowed = client.get("/health", headers={"Origin": "https://planner.test"})
        other = client.get("/health", headers={"Origin": "https://elsewhere.test"})

    assert allowed.headers["access-control-allow-origin"] == "https://planner.test"
    assert "access-control-allow-origin" not in other.headers


def test_cors_origins_from_explicit_settings():
    settings = Settings(
        database_url="sqlite://", secret_key="k", cors_origins=["https://app.test"], _env_file=None,
    )
    with TestClient(main_mod.create_app(settings)) as client:
        resp = client.options("/api/trips/", headers={
            "Origin": "https://app.test",
            "Access-Control-Request-Method": "POST",
        })
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "https://app.test"
