"""Repository for User model operations.

Sync status fields are written with UPDATE statements rather than through
loaded instances: a page rollback expires every instance in the session,
and the status writes must not depend on reloading them.
"""

import asyncio
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import User
from github_org_mirror.schemas.enums import SyncType

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entities and their sync status."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, User, write_lock)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_login(self, login: str) -> User | None:
        """Get a user by GitHub login."""
        return await self.find_one(login=login)

    async def list_all(self) -> list[User]:
        """Get every user ordered by ID."""
        result = await self._session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Create/Update Methods
    # -------------------------------------------------------------------------

    async def create(self, login: str, access_token: str | None = None) -> User:
        """Create a new user (not yet committed)."""
        user = User(login=login, access_token=access_token, sync_in_progress=False)
        self.add(user)
        await self.flush()
        return user

    async def set_token(self, user_id: int, access_token: str) -> None:
        """Replace the stored GitHub credential."""
        await self._update(user_id, access_token=access_token)

    async def mark_started(self, user_id: int, sync_type: SyncType) -> None:
        """Flag a run as active and record its type."""
        await self._update(user_id, sync_in_progress=True, last_sync_type=sync_type)

    async def mark_completed(self, user_id: int, synced_at: datetime) -> None:
        """Clear the active flag and advance the watermark."""
        await self._update(user_id, sync_in_progress=False, last_synced_at=synced_at)

    async def reset_in_progress(self, user_id: int) -> None:
        """Clear the active flag without touching the watermark."""
        await self._update(user_id, sync_in_progress=False)

    async def _update(self, user_id: int, **values: object) -> None:
        stmt = update(User).where(User.id == user_id).values(**values)
        await self._session.execute(stmt)
