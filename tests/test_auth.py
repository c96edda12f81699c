"""Tests for registration, login, token refresh and the current-user endpoint."""
from __future__ import annotations

from mealops.auth import create_tokens, hash_password, verify_password, verify_token


def test_password_hash_roundtrip():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_handles_malformed_hash():
    assert not verify_password("anything", "")
    assert not verify_password("anything", "no-separator")


def test_token_types_are_not_interchangeable():
    tokens = create_tokens("user-1")
    assert verify_token(tokens["access_token"], "access")["sub"] == "user-1"
    assert verify_token(tokens["refresh_token"], "access") is None
    assert verify_token(tokens["access_token"], "refresh") is None


def test_tampered_token_rejected():
    token = create_tokens("user-1")["access_token"]
    header, body, sig = token.split(".")
    assert verify_token(f"{header}.{body}x.{sig}") is None
    assert verify_token("not-a-token") is None


async def test_register_login_me(client):
    resp = await client.post("/api/v1/auth/register", json={"email": "cook@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 201
    user = resp.json()
    assert user["email"] == "cook@example.com"
    assert user["role"] == "USER"
    assert "createdAt" in user
    assert "password" not in str(user).lower()

    resp = await client.post("/api/v1/auth/login", json={"email": "cook@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == user["id"]

    resp = await client.get("/api/v1/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "cook@example.com"


async def test_register_duplicate_email(client):
    body = {"email": "cook@example.com", "password": "s3cret-pass"}
    await client.post("/api/v1/auth/register", json=body)
    resp = await client.post("/api/v1/auth/register", json={**body, "email": "COOK@example.com"})
    assert resp.status_code == 409
    assert resp.json()["message"] == "Email already in use"


async def test_register_rejects_short_password(client):
    resp = await client.post("/api/v1/auth/register", json={"email": "cook@example.com", "password": "short"})
    assert resp.status_code == 422


async def test_register_rejects_bad_email(client):
    resp = await client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "s3cret-pass"})
    assert resp.status_code == 422


async def test_login_bad_credentials(client):
    await client.post("/api/v1/auth/register", json={"email": "cook@example.com", "password": "s3cret-pass"})
    resp = await client.post("/api/v1/auth/login", json={"email": "cook@example.com", "password": "wrong-pass"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "unauthorized", "message": "Invalid credentials"}

    resp = await client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 401


async def test_refresh_issues_new_pair(client, make_user):
    user_id, _ = await make_user()
    refresh_token = create_tokens(user_id)["refresh_token"]
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["id"] == user_id
    assert verify_token(data["access_token"], "access")["sub"] == user_id


async def test_refresh_rejects_access_token(client, make_user):
    user_id, _ = await make_user()
    access_token = create_tokens(user_id)["access_token"]
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
    assert resp.status_code == 401


async def test_me_requires_token(client):
    resp = await client.get("/api/v1/me")
    assert resp.status_code == 401
    resp = await client.get("/api/v1/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
