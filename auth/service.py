"""
Authentication flows: register, authenticate, fetch the current user.

Each function is a stateless orchestration of the credential store, the
password hasher and the token signer. HTTP concerns stay in ``auth.routes``.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import (
    ConflictError,
    HashingError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    TokenError,
    UnauthorizedError,
    ValidationError,
)
from auth.jwt import TokenSigner
from auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from database.models import User
from database.users import (
    DuplicateEmailError,
    create_user,
    get_user_by_email,
    get_user_by_id,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


async def register_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str,
    rounds: int = DEFAULT_ROUNDS,
) -> User:
    """
    Create a user account.

    The email pre-check only short-circuits the common case; the unique
    constraint on ``users.email`` decides when two registrations race.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if await get_user_by_email(session, email) is not None:
        raise ConflictError()

    try:
        password_hash = hash_password(password, rounds=rounds)
    except HashingError as exc:
        logger.error("Password hashing failed during registration: %s", exc)
        raise InternalError() from exc

    try:
        user = await create_user(session, name=name, email=email, password_hash=password_hash)
    except DuplicateEmailError as exc:
        raise ConflictError() from exc

    logger.info("Registered user %s", user.id)
    return user


async def authenticate(
    session: AsyncSession,
    signer: TokenSigner,
    email: str,
    password: str,
) -> str:
    """
    Check credentials and return a bearer token.

    Unknown email and wrong password are the two expected failures; any
    other exception is logged and becomes ``InternalError``.
    """
    try:
        user = await get_user_by_email(session, email)
        if user is None:
            raise NotFoundError("email", "E-mail does not exist")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        token = signer.issue(str(user.id))
    except (NotFoundError, InvalidCredentialsError):
        raise
    except Exception as exc:
        logger.exception("Authentication failed unexpectedly")
        raise InternalError() from exc

    logger.info("Login: %s", user.id)
    return token


async def fetch_self(
    session: AsyncSession,
    signer: TokenSigner,
    token: str | None,
) -> User:
    """Resolve a bearer token to its ``User``."""
    try:
        subject = signer.verify(token)
    except TokenError as exc:
        logger.debug("Rejected token (%s)", exc.kind.value)
        raise UnauthorizedError() from exc

    user = await get_user_by_id(session, subject)
    if user is None:
        raise NotFoundError("user")
    return user
