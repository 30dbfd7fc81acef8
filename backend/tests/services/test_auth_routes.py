"""Auth routes — registration, login, forgot/reset password.

Invariants:
    - Passwords never appear in responses
    - Duplicate email -> 409; bad credentials -> 401 with one shared message
    - Reset tokens are single-use and expire
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from truckest.infrastructure.security import verify_password
from truckest.models import PasswordResetToken, User

from tests.services.fakes import TEST_PASSWORD


async def test_register_creates_user(client, test_session_factory):
    res = await client.post("/api/register", json={
        "name": "Riley", "email": "Riley@Example.com", "password": "secret1",
    })
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["email"] == "riley@example.com"
    assert user["role"] == "TECHNICIAN"
    assert "hashed_password" not in user

    async with test_session_factory() as db:
        stored = (await db.execute(select(User))).scalar_one()
    assert stored.hashed_password != "secret1"
    assert verify_password("secret1", stored.hashed_password)


async def test_register_duplicate_email_conflicts(client, seed_user):
    res = await client.post("/api/register", json={
        "name": "Other", "email": seed_user.email.upper(), "password": "secret1",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_register_validation_is_400(client):
    res = await client.post("/api/register", json={"name": "x", "email": "x@y.z", "password": "123"})
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


async def test_login_success(client, seed_user):
    res = await client.post("/api/auth/login", json={
        "email": seed_user.email, "password": TEST_PASSWORD,
    })
    assert res.status_code == 200
    assert res.json()["user"]["id"] == str(seed_user.id)


async def test_login_wrong_password_and_unknown_email_look_the_same(client, seed_user):
    wrong = await client.post("/api/auth/login", json={
        "email": seed_user.email, "password": "not-the-password",
    })
    unknown = await client.post("/api/auth/login", json={
        "email": "nobody@example.com", "password": "whatever",
    })
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["message"] == unknown.json()["message"] == "Invalid credentials"


async def test_forgot_password_does_not_reveal_accounts(client, seed_user, test_session_factory):
    known = await client.post("/api/auth/forgot-password", json={"email": seed_user.email})
    unknown = await client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()

    async with test_session_factory() as db:
        tokens = (await db.execute(select(PasswordResetToken))).scalars().all()
    assert len(tokens) == 1
    assert tokens[0].user_id == seed_user.id


async def test_reset_password_flow(client, seed_user, test_session_factory):
    await client.post("/api/auth/forgot-password", json={"email": seed_user.email})
    async with test_session_factory() as db:
        token = (await db.execute(select(PasswordResetToken))).scalar_one().token

    res = await client.post("/api/auth/reset-password", json={
        "token": token, "new_password": "brand-new-pass",
    })
    assert res.status_code == 200

    login = await client.post("/api/auth/login", json={
        "email": seed_user.email, "password": "brand-new-pass",
    })
    assert login.status_code == 200

    # Single use
    again = await client.post("/api/auth/reset-password", json={
        "token": token, "new_password": "another-pass",
    })
    assert again.status_code == 400


async def test_reset_password_unknown_token(client):
    res = await client.post("/api/auth/reset-password", json={
        "token": "0" * 64, "new_password": "brand-new-pass",
    })
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid or expired token"


async def test_reset_password_expired_token_is_purged(client, seed_user, test_session_factory):
    async with test_session_factory() as db:
        db.add(PasswordResetToken(
            token="e" * 64,
            user_id=seed_user.id,
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        ))
        await db.commit()

    res = await client.post("/api/auth/reset-password", json={
        "token": "e" * 64, "new_password": "brand-new-pass",
    })
    assert res.status_code == 400

    async with test_session_factory() as db:
        assert await db.get(PasswordResetToken, "e" * 64) is None
