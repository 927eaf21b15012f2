"""Repository for Organization model operations."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import (
    OPEN_SOURCE_ORG_ID,
    OPEN_SOURCE_ORG_LOGIN,
    Organization,
)
from github_org_mirror.schemas.github_api import GitHubOrganization

from .base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for Organization entities."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, Organization, write_lock)

    async def upsert_from_github(
        self, user_id: int, org: GitHubOrganization
    ) -> tuple[Organization, bool]:
        """Upsert an organization keyed by (user_id, external_id)."""
        return await self.upsert(
            {"user_id": user_id, "external_id": org.id},
            org.to_fields(),
        )

    async def find_real(self, user_id: int) -> list[Organization]:
        """Get the user's GitHub organizations, excluding the OpenSource one.

        Args:
            user_id: Owning user ID

        Returns:
            Organizations ordered by ID
        """
        stmt = (
            select(Organization)
            .where(
                Organization.user_id == user_id,
                Organization.external_id != OPEN_SOURCE_ORG_ID,
            )
            .order_by(Organization.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def ensure_open_source(self, user_id: int) -> Organization:
        """Get or create the synthetic OpenSource organization for a user."""
        existing = await self.find_one(user_id=user_id, external_id=OPEN_SOURCE_ORG_ID)
        if existing is not None:
            return existing

        org = Organization(
            user_id=user_id,
            external_id=OPEN_SOURCE_ORG_ID,
            login=OPEN_SOURCE_ORG_LOGIN,
            name=OPEN_SOURCE_ORG_LOGIN,
            description="Curated public repositories",
            url="https://github.com",
        )
        self.add(org)
        await self.flush()
        return org
