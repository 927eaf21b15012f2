"""Commit Manager - page-level commit boundaries for the sync pipeline.

Instead of committing all changes at session exit (all-or-nothing), the
pipeline commits after every processed page and in batches within a page.
A failing page rolls back only what it wrote since the last commit.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from github_org_mirror.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class CommitManager:
    """Manages commit boundaries for paged sync work.

    Usage:
        commit_manager = CommitManager(session, batch_size=50)

        for record in page.items:
            await repo.upsert(...)
            await commit_manager.record_success()  # Auto-commits at batch_size

        await commit_manager.commit()  # Seal the page

    Attributes:
        uncommitted_count: Number of upserts pending commit.
        total_committed: Total upserts committed across all batches.
    """

    def __init__(
        self,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
        batch_size: int = 50,
    ) -> None:
        """Initialize the commit manager.

        Args:
            session: Async SQLAlchemy session to commit on.
            write_lock: Optional lock to serialize commits with flush operations.
            batch_size: Upserts before an automatic commit.
        """
        self._session = session
        self._write_lock = write_lock
        self._batch_size = batch_size
        self._uncommitted_count = 0
        self._total_committed = 0
        self._rollbacks = 0

    @property
    def uncommitted_count(self) -> int:
        """Number of upserts pending commit."""
        return self._uncommitted_count

    @property
    def total_committed(self) -> int:
        """Total upserts committed across all batches."""
        return self._total_committed

    @property
    def rollbacks(self) -> int:
        """Number of rolled back pages."""
        return self._rollbacks

    @property
    def batch_size(self) -> int:
        """Configured batch size."""
        return self._batch_size

    async def record_success(self) -> int:
        """Record a successful upsert, commit if batch size reached.

        Returns:
            Number of upserts committed (0 if batch not full yet).
        """
        self._uncommitted_count += 1
        if self._uncommitted_count >= self._batch_size:
            return await self.commit()
        return 0

    async def commit(self) -> int:
        """Commit the current transaction.

        Always commits, even with no counted upserts, so status updates and
        other uncounted writes are sealed too.

        Returns:
            Number of counted upserts committed.
        """
        if self._write_lock:
            async with self._write_lock:
                await self._session.commit()
        else:
            await self._session.commit()

        committed = self._uncommitted_count
        self._total_committed += committed
        self._uncommitted_count = 0

        if committed:
            logger.debug(
                "Committed batch of {} items (total: {})",
                committed,
                self._total_committed,
            )
        return committed

    async def rollback(self) -> int:
        """Discard everything written since the last commit.

        Note: the session expires every loaded instance on rollback; callers
        must not touch ORM attributes they did not capture beforehand.

        Returns:
            Number of counted upserts discarded.
        """
        if self._write_lock:
            async with self._write_lock:
                await self._session.rollback()
        else:
            await self._session.rollback()

        discarded = self._uncommitted_count
        self._uncommitted_count = 0
        self._rollbacks += 1
        if discarded:
            logger.debug("Rolled back {} uncommitted items", discarded)
        return discarded

    async def finalize(self) -> int:
        """Commit any remaining uncommitted changes."""
        return await self.commit()
