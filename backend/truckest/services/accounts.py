"""Accounts — registration, login and password reset against the users table.

Invariants:
    - Duplicate email -> ConflictError (409), whether caught before insert or by the DB
    - Unknown email and wrong password produce the same AuthenticationError
    - Forgot-password never reveals whether the email exists
    - Reset: password update and token deletion commit together; expired tokens are purged
    - Callers identified by X-User-Id must exist (401 otherwise)
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.errors import (
    AuthenticationError, ConflictError, InvalidRequestError,
)
from truckest.infrastructure.security import (
    generate_reset_token, hash_password, verify_password,
)
from truckest.models import PasswordResetToken, User
from truckest.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession, body: RegisterRequest, bcrypt_rounds: int,
) -> User:
    if await find_user_by_email(db, body.email):
        raise ConflictError("Email already registered")
    user = User(
        name=body.name,
        email=body.email,
        hashed_password=hash_password(body.password, bcrypt_rounds),
        experience_level=body.experience_level,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already registered")
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    user = await find_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


async def issue_reset_token(
    db: AsyncSession, email: str, ttl_minutes: int,
) -> str | None:
    """Store a reset token for a known user. Returns None for unknown emails."""
    user = await find_user_by_email(db, email)
    if not user:
        return None
    token = generate_reset_token()
    db.add(PasswordResetToken(
        token=token,
        user_id=user.id,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=ttl_minutes),
    ))
    await db.commit()
    # No mail delivery: the token is surfaced in the logs
    logger.info(
        f"Password reset token for {email}: {token}",
        extra={"user_id": user.id},
    )
    return token


async def reset_password(
    db: AsyncSession, token: str, new_password: str, bcrypt_rounds: int,
) -> None:
    reset = await db.get(PasswordResetToken, token)
    if reset is None:
        raise InvalidRequestError("Invalid or expired token", field="token")
    if _as_utc(reset.expires_at) < datetime.now(timezone.utc):
        await db.delete(reset)
        await db.commit()
        raise InvalidRequestError("Invalid or expired token", field="token")

    user = await db.get(User, reset.user_id)
    if user is None:
        raise InvalidRequestError("Invalid or expired token", field="token")
    user.hashed_password = hash_password(new_password, bcrypt_rounds)
    await db.delete(reset)
    await db.commit()
    logger.info("Password reset", extra={"user_id": user.id})


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on round-trip; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def require_user(db: AsyncSession, user_id: UUID) -> User:
    """Resolve the X-User-Id caller. Unknown ids are rejected like missing ones."""
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Unknown user")
    return user
