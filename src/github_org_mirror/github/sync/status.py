"""Sync status reporting across users."""

from __future__ import annotations

from typing import TYPE_CHECKING

from github_org_mirror.db.repositories import UserRepository
from github_org_mirror.schemas.status import SyncStatusEntry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class SyncStatusReporter:
    """Read-only view of every user's sync status."""

    def __init__(self, session: AsyncSession) -> None:
        self._users = UserRepository(session)

    async def get_status(self) -> list[SyncStatusEntry]:
        """One entry per user, ordered by user ID."""
        return [
            SyncStatusEntry(
                user_id=user.id,
                login=user.login,
                sync_in_progress=user.sync_in_progress,
                last_synced_at=user.last_synced_at,
                sync_type=user.last_sync_type,
            )
            for user in await self._users.list_all()
        ]
