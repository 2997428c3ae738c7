from datetime import timedelta

import pytest
from fastapi import HTTPException

from trip_planner.auth import (
    verify_password, get_password_hash, create_access_token, verify_token, resolve_identity,
    UserStorage, User, RegisterRequest
)


def test_password_hash_and_verify():
    pw = "password123"
    hashed = get_password_hash(pw)
    assert verify_password(pw, hashed)
    assert not verify_password("wrong", hashed)


def test_create_and_verify_token(settings):
    token = create_access_token({"sub": "userx", "user_id": "idx"}, settings, expires_delta=timedelta(minutes=1))
    payload = verify_token(token, settings)
    assert payload["sub"] == "userx"
    with pytest.raises(HTTPException):
        verify_token("invalidtoken", settings)


def test_expired_token_is_rejected(settings):
    token = create_access_token({"sub": "userx", "user_id": "idx"}, settings, expires_delta=timedelta(minutes=-1))
    with pytest.raises(HTTPException):
        verify_token(token, settings)


def test_resolve_identity(settings):
    token = create_access_token({"sub": "userx", "user_id": "idx"}, settings)
    user = resolve_identity(token, settings)
    assert user.id == "idx"
    assert user.username == "userx"

    assert resolve_identity(None, settings) is None
    assert resolve_identity("garbage", settings) is None
    # token without a user id is not an identity
    assert resolve_identity(create_access_token({"sub": "userx"}, settings), settings) is None


def test_userstorage_crud(session):
    storage = UserStorage(session)
    storage.save(User(user_id="u1", username="u1", email="u1@email.com", hashed_password="pw"))

    found = storage.find_by_id("u1")
    assert found is not None
    assert found.username == "u1"
    assert storage.get_by_username("u1").user_id == "u1"
    assert storage.get_by_email("u1@email.com").user_id == "u1"
    assert storage.get_by_username("nobody") is None
    assert storage.delete("u1") is True
    assert storage.find_by_id("u1") is None
    assert storage.delete("notfound") is False


def test_register_request_validation():
    req = RegisterRequest(username="a", email="a@a.com", password="abcdef", full_name=None)
    assert req.password == "abcdef"
    with pytest.raises(ValueError):
        RegisterRequest(username="a", email="a@a.com", password="abc", full_name=None)
    with pytest.raises(ValueError):
        RegisterRequest(username="a", email="a@a.com", password="a" * 73, full_name=None)
    with pytest.raises(ValueError):
        RegisterRequest(username="  ", email="a@a.com", password="abcdef", full_name=None)


# --- API TESTS ---
def test_register_login_and_me(client):
    resp = client.post("/api/auth/register", json={
        "username": "testuserx",
        "email": "testuserx@email.com",
        "password": "password123"
    })
    assert resp.status_code == 201
    assert "hashed_password" not in resp.json()

    resp = client.post("/api/auth/login", json={"username": "testuserx", "password": "password123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 30 * 60

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "testuserx"

    resp = client.post("/api/auth/login", json={"username": "testuserx", "password": "wrong"})
    assert resp.status_code == 401


def test_register_duplicate(client):
    data = {"username": "dup", "email": "dup@email.com", "password": "password123"}
    assert client.post("/api/auth/register", json=data).status_code == 201
    assert client.post("/api/auth/register", json=data).status_code == 400
    other_name = dict(data, username="dup2")
    assert client.post("/api/auth/register", json=other_name).status_code == 400


def test_register_invalid_email(client):
    data = {"username": "user1", "email": "notanemail", "password": "password123"}
    assert client.post("/api/auth/register", json=data).status_code == 422


def test_register_short_password(client):
    data = {"username": "user2", "email": "user2@email.com", "password": "123"}
    assert client.post("/api/auth/register", json=data).status_code == 422


def test_login_invalid_user(client):
    response = client.post("/api/auth/login", json={"username": "nouser", "password": "nopass"})
    assert response.status_code == 401


def test_me_unauthorized(client):
    assert client.get("/api/auth/me").status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert client.get("/api/auth/me", headers=bad).status_code == 401
