# tests/v1/test_auth_api.py
"""Tests for registration, login and bearer-token resolution."""

from fastapi import status

from beat_market.core.security import create_access_token


def test_register_then_login(client) -> None:
    response = client.post(
        "/api/v1/auth/register", json={"username": "newbie", "password": "hunter22"}
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["username"] == "newbie"
    assert body["balance"] == 0.0
    assert "password_hash" not in body

    login = client.post("/api/v1/auth/login", json={"username": "newbie", "password": "hunter22"})
    assert login.status_code == status.HTTP_200_OK
    token = login.json()["access_token"]
    assert login.json()["token_type"] == "bearer"

    me = client.get("/api/v1/profile/", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["username"] == "newbie"


def test_register_duplicate_username(client, seller) -> None:
    response = client.post("/api/v1/auth/register", json={"username": "seller", "password": "x"})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "conflict"


def test_login_with_wrong_password(client, seller) -> None:
    response = client.post("/api/v1/auth/login", json={"username": "seller", "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_protected_route_without_token(client) -> None:
    response = client.get("/api/v1/profile/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"


def test_protected_route_with_garbage_token(client) -> None:
    response = client.get("/api/v1/profile/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_deleted_account(client) -> None:
    headers = {"Authorization": f"Bearer {create_access_token(987_654)}"}
    response = client.get("/api/v1/profile/", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "User not found"


def test_reserved_usernames_cannot_be_registered(client, beat) -> None:
    for reserved in ("admin0", "platform"):
        response = client.post(
            "/api/v1/auth/register", json={"username": reserved, "password": "hunter22"}
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    login = client.post("/api/v1/auth/login", json={"username": "admin0", "password": "hunter22"})
    assert login.status_code == status.HTTP_401_UNAUTHORIZED
    assert client.get(f"/api/v1/beats/{beat.id}").status_code == status.HTTP_200_OK
