"""
Auth API routes — register, authenticate, me.

Mounted at the application root: ``POST /users``, ``POST /authenticate``,
``GET /me``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from auth import service
from auth.dependencies import bearer_token, db_session, get_settings, get_token_signer
from auth.errors import NotFoundError, UnauthorizedError
from auth.jwt import TokenSigner
from auth.models import UserPublic
from auth.password import MAX_PASSWORD_BYTES
from config.settings import Settings

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class AuthenticateRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class TokenResponse(BaseModel):
    token: str


class MeResponse(BaseModel):
    user: UserPublic


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/users", status_code=status.HTTP_201_CREATED, response_class=Response)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Register a new user. Answers 201 with an empty body."""
    await service.register_user(
        session,
        name=req.name,
        email=req.email,
        password=req.password,
        rounds=settings.bcrypt_rounds,
    )
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/authenticate", response_model=TokenResponse)
async def authenticate(
    req: AuthenticateRequest,
    session: AsyncSession = Depends(db_session),
    signer: TokenSigner = Depends(get_token_signer),
) -> Dict[str, Any]:
    """Exchange email + password for a bearer token."""
    token = await service.authenticate(session, signer, req.email, req.password)
    return {"token": token}


@router.get("/me", response_model=MeResponse)
async def me(
    token: Optional[str] = Depends(bearer_token),
    session: AsyncSession = Depends(db_session),
    signer: TokenSigner = Depends(get_token_signer),
) -> Dict[str, Any]:
    """Return the user the bearer token was issued to."""
    try:
        user = await service.fetch_self(session, signer, token)
    except NotFoundError as exc:
        # A token for a vanished user is answered like any other bad token.
        raise UnauthorizedError() from exc
    return {"user": UserPublic.model_validate(user)}
