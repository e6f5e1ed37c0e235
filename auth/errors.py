"""
Error taxonomy for the authentication flow.

Every ``AuthError`` carries the HTTP status it is reported with and a
client-safe ``message``. ``HashingError`` and ``TokenError`` are raised by
the primitives and translated by the controller; they never reach a client.

Hierarchy::

    AuthError
    ├── ValidationError          400
    ├── ConflictError            409
    ├── NotFoundError            409
    ├── InvalidCredentialsError  409
    ├── UnauthorizedError        401
    └── InternalError            500
    HashingError
    TokenError(kind)
"""

from __future__ import annotations

from enum import Enum

from fastapi import status


class AuthError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class ConflictError(AuthError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "E-mail already exists"


class NotFoundError(AuthError):
    """
    A looked-up record is missing.

    Reported as 409 like a bad request rather than 404; the ``/me`` route
    reports a missing user as 401 instead.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, what: str, message: str | None = None):
        self.what = what
        super().__init__(message or f"{what.capitalize()} does not exist")


class InvalidCredentialsError(AuthError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Invalid credentials"


class UnauthorizedError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InternalError(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


class HashingError(Exception):
    """The password hashing primitive failed or was given a malformed hash."""


class TokenErrorKind(str, Enum):
    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"


class TokenError(Exception):
    def __init__(self, kind: TokenErrorKind, detail: str = ""):
        self.kind = kind
        super().__init__(detail or kind.value)
