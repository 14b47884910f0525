"""Waitlist repository for Supabase.

Table schema expected:
    waitlist (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        email TEXT UNIQUE NOT NULL,
        wallet TEXT,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
"""

import structlog
from postgrest.exceptions import APIError

from squidmarket.core.exceptions import DuplicateEntryError
from squidmarket.data.models.waitlist import WaitlistEntry, WaitlistSignup
from squidmarket.data.supabase.client import SupabaseClient

log = structlog.get_logger(__name__)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class WaitlistRepository:
    """Repository for the ``waitlist`` table."""

    TABLE_NAME = "waitlist"

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def add(self, signup: WaitlistSignup) -> WaitlistEntry:
        """Insert a signup.

        Plain insert, not an upsert: the unique email constraint is what
        rejects a second signup.

        Raises:
            DuplicateEntryError: If the email is already on the waitlist.
        """
        record = {"email": signup.email, "wallet": signup.wallet.lower() if signup.wallet else None}
        try:
            result = await self._client.client.table(self.TABLE_NAME).insert(record).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateEntryError(table=self.TABLE_NAME, key=signup.email) from e
            raise

        log.info("waitlist_signup_added", has_wallet=signup.wallet is not None)
        return WaitlistEntry(**result.data[0])

    async def count(self) -> int:
        """Number of signups."""
        result = await (
            self._client.client.table(self.TABLE_NAME)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return result.count or 0
