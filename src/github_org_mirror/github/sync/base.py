"""Shared plumbing for sync stages.

A stage walks one family of GitHub list endpoints and upserts what it
finds. All stages share a SyncContext (client, pacer, repositories and
commit boundaries) and the `paginate` loop below, which owns page
numbering, termination, pacing and the per-page commit/rollback.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar

from github_org_mirror.db.repositories import (
    CommitRepository,
    IssueHistoryRepository,
    IssueRepository,
    OrganizationRepository,
    OrganizationUserRepository,
    PullRequestRepository,
    RepositoryRepository,
    UserRepository,
)
from github_org_mirror.logging import bind_repo, bind_stage
from github_org_mirror.schemas.base import ensure_utc
from github_org_mirror.schemas.enums import SyncType

from .enums import SyncStageName

if TYPE_CHECKING:
    from loguru import Logger
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_org_mirror.config import SyncConfig
    from github_org_mirror.db.models import Organization, Repository
    from github_org_mirror.github.client import GitHubClient, Page
    from github_org_mirror.github.pacing import RequestPacer

    from .commit_manager import CommitManager
    from .results import StageResult, SyncRunResult

# fetch(page=..., per_page=...) -> Page
PageFetcher = Callable[..., Awaitable["Page"]]
# handle(page) -> whether to request the next page
PageHandler = Callable[["Page"], Awaitable[bool]]


@dataclass(frozen=True)
class OrgRef:
    """Detached snapshot of an Organization row.

    Stages iterate over snapshots because a page rollback expires every
    ORM instance held by the session.
    """

    id: int
    external_id: int
    login: str

    @classmethod
    def from_model(cls, org: Organization) -> OrgRef:
        return cls(id=org.id, external_id=org.external_id, login=org.login)


@dataclass(frozen=True)
class RepoRef:
    """Detached snapshot of a Repository row."""

    id: int
    external_id: int
    full_name: str
    organization_id: int

    @classmethod
    def from_model(cls, repo: Repository) -> RepoRef:
        return cls(
            id=repo.id,
            external_id=repo.external_id,
            full_name=repo.full_name,
            organization_id=repo.organization_id,
        )


@dataclass
class SyncRepositories:
    """Per-collection repositories bound to one session."""

    users: UserRepository
    organizations: OrganizationRepository
    repositories: RepositoryRepository
    commits: CommitRepository
    pull_requests: PullRequestRepository
    issues: IssueRepository
    issue_history: IssueHistoryRepository
    organization_users: OrganizationUserRepository

    @classmethod
    def from_session(
        cls,
        session: AsyncSession,
        write_lock: asyncio.Lock | None = None,
    ) -> SyncRepositories:
        return cls(
            users=UserRepository(session, write_lock),
            organizations=OrganizationRepository(session, write_lock),
            repositories=RepositoryRepository(session, write_lock),
            commits=CommitRepository(session, write_lock),
            pull_requests=PullRequestRepository(session, write_lock),
            issues=IssueRepository(session, write_lock),
            issue_history=IssueHistoryRepository(session, write_lock),
            organization_users=OrganizationUserRepository(session, write_lock),
        )


@dataclass
class SyncContext:
    """Everything a stage needs for one user's run."""

    user_id: int
    sync_type: SyncType
    watermark: datetime | None
    """The user's last_synced_at at run start (None on a full sync)."""

    client: GitHubClient
    pacer: RequestPacer
    config: SyncConfig
    repos: SyncRepositories
    commit_manager: CommitManager
    run_result: SyncRunResult

    @property
    def is_partial(self) -> bool:
        return self.sync_type == SyncType.PARTIAL and self.watermark is not None

    @property
    def since(self) -> datetime | None:
        """Value for `since` API filters (None on a full sync)."""
        return self.watermark if self.is_partial else None

    def is_fresh(self, updated_at: datetime | None) -> bool:
        """Check whether a record changed after the watermark.

        Always True on a full sync. Records without a timestamp count as fresh.
        """
        if not self.is_partial or updated_at is None:
            return True
        assert self.watermark is not None
        return ensure_utc(updated_at) > ensure_utc(self.watermark)


class StageBase:
    """Shared plumbing of stages and sub-stages.

    Subclasses set `name`, which selects the result bucket and log context.
    """

    name: ClassVar[SyncStageName]

    def __init__(self, context: SyncContext) -> None:
        self._ctx = context
        self._logger: Logger = bind_stage(context.user_id, self.name.value)

    @property
    def context(self) -> SyncContext:
        return self._ctx

    @property
    def result(self) -> StageResult:
        """Result bucket of this stage within the run."""
        return self._ctx.run_result.stage(self.name)

    def repo_logger(self, full_name: str) -> Logger:
        """Logger bound to a repository within this stage."""
        return bind_repo(self._ctx.user_id, self.name.value, full_name)

    async def record_upsert(self, created: bool, result: StageResult | None = None) -> None:
        """Count an upsert and let the commit manager batch it."""
        (result or self.result).record_upsert(created)
        await self._ctx.commit_manager.record_success()

    async def paginate(
        self,
        fetch: PageFetcher,
        handle: PageHandler,
        *,
        label: str,
        result: StageResult | None = None,
        history: bool = False,
    ) -> int:
        """Walk a paginated endpoint one page at a time.

        Pending writes of the caller are committed first so that a failing
        page here can only roll back its own writes. Each page is committed
        once `handle` returns. Paging stops on a short page, when `handle`
        returns False, or on the first failing page (its uncommitted writes
        are rolled back and the error is recorded).

        Args:
            fetch: Client method accepting page= and per_page= keywords
            handle: Page callback; returns whether to continue
            label: Entity description used in logs and recorded errors
            result: Result bucket to record into (defaults to this stage's)
            history: Use the shorter issue-history delay between pages

        Returns:
            Number of pages processed successfully
        """
        ctx = self._ctx
        result = result or self.result
        per_page = ctx.config.per_page
        await ctx.commit_manager.commit()

        page_number = 1
        processed = 0
        while True:
            try:
                page = await ctx.pacer.call_with_backoff(fetch, page=page_number, per_page=per_page)
                keep_going = await handle(page)
                await ctx.commit_manager.commit()
            except Exception as e:
                await ctx.commit_manager.rollback()
                result.record_error(f"{label} page {page_number}", e)
                self._logger.warning(
                    "Failed on {} page {}: {}: {}", label, page_number, type(e).__name__, e
                )
                break

            processed += 1
            result.pages += 1
            if page.is_last or not keep_going:
                break

            page_number += 1
            if history:
                await ctx.pacer.pause_between_history_pages()
            else:
                await ctx.pacer.pause_between_pages()

        return processed


class SyncStage(StageBase, ABC):
    """A top-level stage of a run.

    Exceptions raised from `run` are caught by the orchestrator and mark
    the stage as failed.
    """

    @abstractmethod
    async def run(self) -> None:
        """Execute the stage."""
