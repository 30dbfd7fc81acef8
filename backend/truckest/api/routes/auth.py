"""Auth Routes — registration, login and password reset.

Invariants:
    - Responses never include password hashes (services/presenters.present_user)
    - forgot-password answers identically for known and unknown emails
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.config import get_settings
from truckest.infrastructure.database import get_db
from truckest.schemas.auth import (
    ForgotPasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest,
)
from truckest.services import accounts
from truckest.services.presenters import present_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = (
    "If an account exists for that email, a reset link has been sent."
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await accounts.register_user(db, body, get_settings().bcrypt_rounds)
    return {
        "success": True,
        "message": "User registered successfully",
        "user": present_user(user),
    }


@router.post("/auth/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await accounts.authenticate(db, body.email, body.password)
    logger.info("User logged in", extra={"user_id": user.id})
    return {"success": True, "message": "Login successful", "user": present_user(user)}


@router.post("/auth/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest, db: AsyncSession = Depends(get_db),
):
    await accounts.issue_reset_token(
        db, body.email, get_settings().password_reset_ttl_minutes,
    )
    return {"success": True, "message": FORGOT_PASSWORD_MESSAGE}


@router.post("/auth/reset-password")
async def reset_password(
    body: ResetPasswordRequest, db: AsyncSession = Depends(get_db),
):
    await accounts.reset_password(
        db, body.token, body.new_password, get_settings().bcrypt_rounds,
    )
    return {"success": True, "message": "Password has been reset"}
