"""Auth API tests: registration, login, and the identity pipeline.

Learn: Every request here runs the real auth dependency chain: bearer
header parsing → JWT verification → user lookup. 401 bodies are
identical regardless of why the token was rejected.
"""

import uuid
from datetime import timedelta

import pytest

from tasktrack.auth.dependencies import get_token_service


def _email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    email = _email("reg")
    r = await client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": email, "password": "secret1"},
    )
    assert r.status_code == 201
    user = r.json()
    assert user["email"] == email
    assert user["name"] == "Ana"
    assert user["role"] == "user"
    assert "id" in user
    assert "createdAt" in user
    assert "password" not in user
    assert "passwordHash" not in user
    assert "secret1" not in r.text


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    body = {"name": "Ana", "email": _email("dup"), "password": "secret1"}
    r1 = await client.post("/api/auth/register", json=body)
    assert r1.status_code == 201

    r2 = await client.post("/api/auth/register", json={**body, "name": "Other"})
    assert r2.status_code == 400
    assert r2.json()["error"] == "duplicate_identity"


@pytest.mark.asyncio
async def test_register_validation_names_fields(client):
    r = await client.post(
        "/api/auth/register",
        json={"name": "", "email": "not-an-email", "password": "abc"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "validation_error"
    assert {e["field"] for e in body["errors"]} == {"name", "email", "password"}


@pytest.mark.asyncio
async def test_register_name_too_long_is_400(client):
    r = await client.post(
        "/api/auth/register",
        json={"name": "n" * 101, "email": _email("long"), "password": "secret1"},
    )
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["name"]


@pytest.mark.asyncio
async def test_register_email_too_long_is_400(client):
    email = "e" * 250 + "@example.com"
    r = await client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": email, "password": "secret1"},
    )
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["email"]


@pytest.mark.asyncio
async def test_register_missing_body_fields(client):
    r = await client.post("/api/auth/register", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_register_wrong_types_are_400(client):
    r = await client.post(
        "/api/auth/register",
        json={"name": ["x"], "email": _email("t"), "password": "secret1"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_returns_token_for_subject(client):
    email = _email("login")
    r = await client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": email, "password": "secret1"},
    )
    user_id = r.json()["id"]

    r = await client.post("/api/auth/login", json={"email": email, "password": "secret1"})
    assert r.status_code == 200
    body = r.json()
    assert body["tokenType"] == "bearer"

    claims = get_token_service().verify(body["token"])
    assert claims.subject == user_id
    assert claims.role == "user"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    email = _email("wrong")
    await client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": email, "password": "secret1"},
    )

    wrong_pw = await client.post(
        "/api/auth/login", json={"email": email, "password": "nope-nope"}
    )
    unknown = await client.post(
        "/api/auth/login", json={"email": _email("nobody"), "password": "secret1"}
    )

    assert wrong_pw.status_code == 400
    assert unknown.status_code == 400
    assert wrong_pw.json() == unknown.json()
    assert wrong_pw.json()["error"] == "invalid_credentials"


# ═══════════════════════════════════════════════════════════
# Identity pipeline
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, signup):
    user, headers = await signup("Ana")
    r = await client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == user["id"]
    assert r.json()["email"] == user["email"]


@pytest.mark.asyncio
async def test_missing_header_is_401(client):
    r = await client.get("/api/items")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    assert r.json()["error"] == "unauthenticated"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    ["Token abc", "Bearer", "Bearer ", "bearer-ish", "Basic dXNlcjpwYXNz"],
)
async def test_malformed_header_is_401(client, header):
    r = await client.get("/api/items", headers={"Authorization": header})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_401(client):
    r = await client.get(
        "/api/items", headers={"Authorization": "Bearer invalid_token_here"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_expired_and_tampered_tokens_look_the_same(client, signup):
    user, _ = await signup("Ana")
    tokens = get_token_service()

    expired = tokens.issue(user["id"], "user", ttl=timedelta(seconds=-30))
    header, payload, sig = tokens.issue(user["id"], "user").split(".")
    i = len(sig) // 2
    tampered = ".".join([header, payload, sig[:i] + ("A" if sig[i] != "A" else "B") + sig[i + 1:]])

    r_expired = await client.get("/api/items", headers={"Authorization": f"Bearer {expired}"})
    r_tampered = await client.get("/api/items", headers={"Authorization": f"Bearer {tampered}"})

    assert r_expired.status_code == 401
    assert r_tampered.status_code == 401
    assert r_expired.json() == r_tampered.json()


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_401(client, signup, run_store):
    user, headers = await signup("Ghost")
    assert (await client.get("/api/items", headers=headers)).status_code == 200

    await run_store(lambda store: store.delete(user["id"]))

    r = await client.get("/api/items", headers=headers)
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_subject_is_401(client):
    token = get_token_service().issue(str(uuid.uuid4()), "admin")
    r = await client.get("/api/items", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
