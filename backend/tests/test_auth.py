"""
Tests for authentication endpoints: signup and login.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.security import verify_password
from app.models.user import User


@pytest.mark.asyncio
async def test_signup(client: AsyncClient, db_session):
    """Successful signup returns the user without the password hash."""
    response = await client.post("/api/v1/auth/signup", json={
        "name": "  Ada Lovelace ",
        "email": "Ada@Example.com",
        "password": "analytical",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Ada Lovelace"
    assert data["email"] == "ada@example.com"
    assert "password" not in data
    assert "hashed_password" not in data

    result = await db_session.execute(select(User).where(User.email == "ada@example.com"))
    user = result.scalar_one()
    assert user.hashed_password != "analytical"
    assert verify_password("analytical", user.hashed_password)


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Someone Else",
        "email": "TEST@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"


@pytest.mark.asyncio
async def test_signup_missing_fields(client: AsyncClient):
    response = await client.post("/api/v1/auth/signup", json={"email": "new@example.com"})
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_signup_short_password(client: AsyncClient):
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Weak",
        "email": "weak@example.com",
        "password": "12345",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_signup_password_over_72_bytes(client: AsyncClient):
    """28 CJK characters are 84 UTF-8 bytes, too long for bcrypt."""
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Wang Wei",
        "email": "wang@example.com",
        "password": "密码密码" * 7,
    })
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_signup_multibyte_password_within_limit(client: AsyncClient):
    login_password = "密码密码" * 6  # 72 bytes
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Wang Wei",
        "email": "wang@example.com",
        "password": login_password,
    })
    assert response.status_code == 201

    login = await client.post("/api/v1/auth/login", json={
        "email": "wang@example.com",
        "password": login_password,
    })
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_signup_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/signup", json={
        "name": "Nobody",
        "email": "not-an-email",
        "password": "securepassword123",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return JWT token."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]


@pytest.mark.asyncio
async def test_login_token_authorizes_event_writes(client: AsyncClient, test_user, event_payload):
    login = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    token = login.json()["access_token"]

    response = await client.post(
        "/api/v1/events/",
        json=event_payload,
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "whatever123",
    })
    assert response.status_code == 401
