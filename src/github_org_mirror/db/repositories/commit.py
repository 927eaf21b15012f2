"""Repository for Commit model operations."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import Commit
from github_org_mirror.schemas.github_api import GitHubCommit

from .base import BaseRepository


class CommitRepository(BaseRepository[Commit]):
    """Repository for Commit entities, keyed by SHA within a user's scope."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, Commit, write_lock)

    async def upsert_from_github(
        self,
        user_id: int,
        repository_id: int,
        commit: GitHubCommit,
    ) -> tuple[Commit, bool]:
        """Upsert a commit keyed by (user_id, sha)."""
        return await self.upsert(
            {"user_id": user_id, "sha": commit.sha},
            {**commit.to_fields(), "repository_id": repository_id},
        )
