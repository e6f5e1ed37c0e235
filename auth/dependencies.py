"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_settings``, ``get_token_signer`` and
``bearer_token`` dependencies used by the auth routes.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenSigner
from config.settings import Settings
from database.session import get_db_session


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


_bearer_scheme = HTTPBearer(auto_error=False)


async def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> Optional[str]:
    """
    Return the token from an ``Authorization: Bearer <token>`` header.

    A missing header or another scheme yields ``None``; the signer reports
    that as a missing token.
    """
    return credentials.credentials if credentials else None
