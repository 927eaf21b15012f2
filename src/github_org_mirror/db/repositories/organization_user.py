"""Repository for OrganizationUser model operations."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import OrganizationUser
from github_org_mirror.schemas.github_api import GitHubAccount, GitHubUserDetail

from .base import BaseRepository


class OrganizationUserRepository(BaseRepository[OrganizationUser]):
    """Repository for organization members and curated-repo contributors."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, OrganizationUser, write_lock)

    async def count_for_org(self, user_id: int, organization_id: int) -> int:
        """Count stored members of an organization."""
        return await self.count_documents(user_id=user_id, organization_id=organization_id)

    async def exists(self, user_id: int, organization_id: int, external_id: int) -> bool:
        """Check whether a member is already stored for an organization."""
        member = await self.find_one(
            user_id=user_id, organization_id=organization_id, external_id=external_id
        )
        return member is not None

    async def upsert_from_github(
        self,
        user_id: int,
        organization_id: int,
        account: GitHubAccount,
    ) -> tuple[OrganizationUser, bool]:
        """Upsert a member keyed by (external_id, organization_id, user_id).

        Detailed profiles (GitHubUserDetail) also fill the enrichment fields.
        """
        if isinstance(account, GitHubUserDetail):
            fields = account.to_member_fields()
        else:
            fields = {
                "login": account.login,
                "avatar_url": account.avatar_url,
                "url": account.html_url,
            }
        return await self.upsert(
            {"user_id": user_id, "organization_id": organization_id, "external_id": account.id},
            fields,
        )
