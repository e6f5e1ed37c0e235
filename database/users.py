"""
Credential store queries for ``User`` rows.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import EMAIL_UNIQUE_CONSTRAINT, User

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """The unique constraint on ``users.email`` rejected an insert."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("email already registered")


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def _is_email_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the unique index on ``users.email``."""
    # PostgreSQL names the constraint; SQLite names the column.
    detail = str(exc.orig)
    return EMAIL_UNIQUE_CONSTRAINT in detail or "UNIQUE constraint failed: users.email" in detail


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    """Return the user for ``user_id``; a value that is not a UUID matches nothing."""
    uid = _to_uuid(user_id)
    if uid is None:
        return None
    return await session.get(User, uid)


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
) -> User:
    """
    Insert a new ``User`` and flush so the id is assigned.

    Raises ``DuplicateEmailError`` when a concurrent insert already took the
    email. Any other integrity violation is re-raised. The session is rolled
    back in both cases.
    """
    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=password_hash,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        if not _is_email_conflict(exc):
            raise
        logger.info("Insert rejected by unique constraint for a registration")
        raise DuplicateEmailError(email) from exc
    return user
