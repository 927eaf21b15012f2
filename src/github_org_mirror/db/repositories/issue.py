"""Repository for Issue model operations."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import Issue
from github_org_mirror.schemas.github_api import GitHubIssue

from .base import BaseRepository


class IssueRepository(BaseRepository[Issue]):
    """Repository for Issue entities."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, Issue, write_lock)

    async def upsert_from_github(
        self,
        user_id: int,
        repository_id: int,
        issue: GitHubIssue,
    ) -> tuple[Issue, bool]:
        """Upsert an issue keyed by (user_id, external_id).

        Raises:
            ValueError: If the record is a pull request from the issues listing
        """
        if issue.is_pull_request:
            raise ValueError(f"Record #{issue.number} is a pull request, not an issue")
        return await self.upsert(
            {"user_id": user_id, "external_id": issue.id},
            {**issue.to_fields(), "repository_id": repository_id},
        )
