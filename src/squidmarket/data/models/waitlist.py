"""Waitlist signup models."""

import re
from datetime import datetime

from pydantic import Field, field_validator

from squidmarket.data.models.base import CamelModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class WaitlistSignup(CamelModel):
    """Incoming waitlist signup."""

    email: str = Field(min_length=1)
    wallet: str | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v


class WaitlistEntry(CamelModel):
    """Row of the ``waitlist`` table (email is unique)."""

    id: str | None = None
    email: str
    wallet: str | None = None
    created_at: datetime | None = None
