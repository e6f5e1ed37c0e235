"""Re-exports the ``User`` ORM model and defines its outward-facing projection."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from database.models import User  # noqa: F401


class UserPublic(BaseModel):
    """A ``User`` as returned to clients; ``password_hash`` has no field here."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    created_at: Optional[datetime] = None


__all__ = ["User", "UserPublic"]
