"""Repository for GitHub Repository model operations."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import OPEN_SOURCE_ORG_ID, Organization, Repository
from github_org_mirror.schemas.github_api import GitHubRepository

from .base import BaseRepository


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for GitHub Repository entities."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, Repository, write_lock)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_full_name(self, user_id: int, full_name: str) -> Repository | None:
        """Get a user's repository by its full name (owner/repo)."""
        return await self.find_one(user_id=user_id, full_name=full_name)

    async def find_in_real_orgs(self, user_id: int) -> list[Repository]:
        """Get every repository of the user's real (non-OpenSource) organizations."""
        stmt = (
            select(Repository)
            .join(Organization, Repository.organization_id == Organization.id)
            .where(
                Repository.user_id == user_id,
                Organization.external_id != OPEN_SOURCE_ORG_ID,
            )
            .order_by(Repository.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def any_with_full_names(self, user_id: int, full_names: list[str]) -> bool:
        """Check whether any of the given repositories is already stored."""
        if not full_names:
            return False
        stmt = (
            select(Repository.id)
            .where(Repository.user_id == user_id, Repository.full_name.in_(full_names))
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    # -------------------------------------------------------------------------
    # Create/Update Methods
    # -------------------------------------------------------------------------

    async def upsert_from_github(
        self,
        user_id: int,
        organization_id: int,
        repo: GitHubRepository,
    ) -> tuple[Repository, bool]:
        """Upsert a repository keyed by (user_id, external_id), linked to its org."""
        return await self.upsert(
            {"user_id": user_id, "external_id": repo.id},
            {**repo.to_fields(), "organization_id": organization_id},
        )
