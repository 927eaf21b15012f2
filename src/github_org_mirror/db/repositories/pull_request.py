"""Repository for PullRequest model operations."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import PullRequest
from github_org_mirror.schemas.github_api import GitHubPullRequest

from .base import BaseRepository


class PullRequestRepository(BaseRepository[PullRequest]):
    """Repository for PullRequest entities."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, PullRequest, write_lock)

    async def get_by_number(
        self, user_id: int, repository_id: int, number: int
    ) -> PullRequest | None:
        """Get a PR by repository and number."""
        return await self.find_one(user_id=user_id, repository_id=repository_id, number=number)

    async def upsert_from_github(
        self,
        user_id: int,
        repository_id: int,
        pr: GitHubPullRequest,
        commit_shas: list[str] | None = None,
    ) -> tuple[PullRequest, bool]:
        """Upsert a PR keyed by (user_id, external_id).

        Args:
            user_id: Owning user ID
            repository_id: Parent repository ID
            pr: Parsed PR payload
            commit_shas: SHAs to embed (None keeps the stored list on update)
        """
        fields = {**pr.to_fields(commit_shas), "repository_id": repository_id}
        return await self.upsert({"user_id": user_id, "external_id": pr.id}, fields)
