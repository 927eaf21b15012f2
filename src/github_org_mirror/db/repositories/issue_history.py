"""Repository for IssueHistory model operations."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from github_org_mirror.db.models import IssueHistory

from .base import BaseRepository


class IssueHistoryRepository(BaseRepository[IssueHistory]):
    """Repository for normalized issue timeline events."""

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(session, IssueHistory, write_lock)

    async def upsert_events(
        self,
        user_id: int,
        issue_id: int,
        repository_id: int,
        events: Iterable[Mapping[str, Any]],
    ) -> int:
        """Bulk-upsert one page of events keyed by (user_id, issue_id, external_id).

        Args:
            user_id: Owning user ID
            issue_id: Parent issue ID
            repository_id: Repository of the issue (denormalized)
            events: Row values, each including its `external_id`

        Returns:
            Number of newly created rows
        """
        operations = []
        for event in events:
            fields = dict(event)
            external_id = fields.pop("external_id")
            operations.append(
                (
                    {"user_id": user_id, "issue_id": issue_id, "external_id": external_id},
                    {**fields, "repository_id": repository_id},
                )
            )
        results = await self.bulk_upsert(operations)
        return sum(1 for _entity, created in results if created)
