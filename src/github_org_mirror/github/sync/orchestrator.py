"""GitHub Sync Orchestrator - run every sync stage for one user.

A run walks the user's organizations, repositories, commits, pull
requests, issues (with their timelines) and members, then mirrors the
curated public repositories. Stages run sequentially and are isolated
from one another: a failing stage is recorded and the next one runs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

from github_org_mirror.config import SyncConfig, get_settings
from github_org_mirror.github.client import GitHubClient
from github_org_mirror.github.pacing import RequestPacer
from github_org_mirror.logging import bind_user
from github_org_mirror.schemas.enums import SyncType

from .base import SyncContext, SyncRepositories, SyncStage
from .commit_manager import CommitManager
from .commits import CommitsStage
from .curated import CuratedStage
from .enums import SyncState
from .exceptions import MissingCredentialError, SyncError, UserNotFoundError
from .issues import IssuesStage
from .members import MembersStage
from .organizations import OrganizationsStage
from .pull_requests import PullRequestsStage
from .repositories import RepositoriesStage
from .results import SyncRunResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

ClientFactory = Callable[[str], GitHubClient]


class GitHubSyncOrchestrator:
    """Orchestrates one sync run for one user.

    State machine: IDLE -> INITIALIZING -> RUNNING -> COMPLETED | FAILED.

    Usage:
        async with get_session() as session:
            orchestrator = GitHubSyncOrchestrator(user_id=1, session=session)
            await orchestrator.initialize()
            result = await orchestrator.run_sync()
            print(result.to_dict())

    The caller is responsible for refusing to start a run while the user's
    `sync_in_progress` flag is set.
    """

    STAGES: ClassVar[tuple[type[SyncStage], ...]] = (
        OrganizationsStage,
        RepositoriesStage,
        CommitsStage,
        PullRequestsStage,
        IssuesStage,
        MembersStage,
        CuratedStage,
    )

    def __init__(
        self,
        user_id: int,
        session: AsyncSession,
        *,
        client_factory: ClientFactory | None = None,
        pacer: RequestPacer | None = None,
        config: SyncConfig | None = None,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            user_id: Local ID of the user to sync
            session: Async session dedicated to this run
            client_factory: Builds a GitHubClient from the user's token
                            (defaults to GitHubClient)
            pacer: RequestPacer (defaults to one built from config)
            config: Sync configuration (uses settings if not provided)
            write_lock: Optional lock shared with other writers on the session
        """
        self._user_id = user_id
        self._session = session
        self._config = config or get_settings().sync
        self._client_factory = client_factory or GitHubClient
        self._pacer = pacer or RequestPacer(self._config)
        self._repos = SyncRepositories.from_session(session, write_lock)
        self._commit_manager = CommitManager(
            session, write_lock, batch_size=self._config.commit_batch_size
        )
        self._logger = bind_user(user_id)

        self._state = SyncState.IDLE
        self._result = SyncRunResult(user_id=user_id)
        self._token: str | None = None
        self._login: str | None = None
        self._watermark: datetime | None = None

    @property
    def state(self) -> SyncState:
        """Current lifecycle state."""
        return self._state

    @property
    def result(self) -> SyncRunResult:
        """Result of the current (or last) run."""
        return self._result

    @property
    def sync_type(self) -> SyncType:
        """Full on the first run, partial once a watermark exists."""
        return SyncType.FULL if self._watermark is None else SyncType.PARTIAL

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """Load the user, their token and the previous sync timestamp.

        Raises:
            UserNotFoundError: If the user does not exist
            MissingCredentialError: If the user has no access token
        """
        self._state = SyncState.INITIALIZING
        try:
            user = await self._repos.users.get_by_id(self._user_id)
            if user is None:
                raise UserNotFoundError(self._user_id)
            if not user.access_token:
                raise MissingCredentialError(self._user_id)
            self._token = user.access_token
            self._login = user.login
            self._watermark = user.last_synced_at
        except Exception as e:
            await self._fail(e)
            raise

        self._logger.debug(
            "Initialized sync for {} (last synced: {})",
            self._login,
            self._watermark.isoformat() if self._watermark else "never",
        )

    async def run_sync(self) -> SyncRunResult:
        """Run every stage in order and persist the status transitions.

        Stage failures are recorded in the result and do not stop the run.
        Exceptions outside the stages reset the in-progress flag, leave
        `last_synced_at` unchanged and propagate.

        Returns:
            SyncRunResult with per-stage outcomes

        Raises:
            SyncError: If called before a successful initialize()
        """
        if self._state != SyncState.INITIALIZING or self._token is None:
            raise SyncError("initialize() must succeed before run_sync()", self._user_id)

        sync_type = self.sync_type
        self._result.sync_type = sync_type
        self._state = SyncState.RUNNING
        self._logger.info("Starting {} sync for {}", sync_type.value, self._login)

        try:
            await self._repos.users.mark_started(self._user_id, sync_type)
            await self._commit_manager.commit()

            async with self._client_factory(self._token) as client:
                context = SyncContext(
                    user_id=self._user_id,
                    sync_type=sync_type,
                    watermark=self._watermark,
                    client=client,
                    pacer=self._pacer,
                    config=self._config,
                    repos=self._repos,
                    commit_manager=self._commit_manager,
                    run_result=self._result,
                )
                for stage_class in self.STAGES:
                    await self._run_stage(stage_class(context))

            completed_at = datetime.now(UTC)
            await self._repos.users.mark_completed(self._user_id, completed_at)
            await self._commit_manager.finalize()
        except Exception as e:
            await self._fail(e)
            raise

        self._state = SyncState.COMPLETED
        self._result.state = SyncState.COMPLETED
        self._result.completed_at = completed_at
        self._logger.info(
            "Sync completed: {} created, {} updated, {} errors, failed stages: {}",
            self._result.total_created,
            self._result.total_updated,
            self._result.total_errors,
            [s.value for s in self._result.failed_stages] or "none",
        )
        return self._result

    async def _run_stage(self, stage: SyncStage) -> None:
        """Run one stage, containing any exception it raises."""
        stage_result = stage.result
        stage_result.started_at = datetime.now(UTC)
        self._logger.info("Stage {} started", stage.name.value)
        try:
            await stage.run()
            await self._commit_manager.commit()
        except Exception as e:
            await self._commit_manager.rollback()
            stage_result.failed = True
            stage_result.record_error(stage.name.value, e)
            self._logger.error("Stage {} failed: {}: {}", stage.name.value, type(e).__name__, e)
        finally:
            stage_result.completed_at = datetime.now(UTC)

    async def _fail(self, error: Exception) -> None:
        """Enter FAILED and reset the in-progress flag (best effort)."""
        self._state = SyncState.FAILED
        self._result.state = SyncState.FAILED
        self._result.error = f"{type(error).__name__}: {error}"
        self._result.completed_at = datetime.now(UTC)
        self._logger.error("Sync failed: {}", self._result.error)

        try:
            await self._session.rollback()
            await self._repos.users.reset_in_progress(self._user_id)
            await self._session.commit()
        except Exception as reset_error:
            # The original error is re-raised by the caller
            self._logger.error("Could not reset sync flag: {}", reset_error)
