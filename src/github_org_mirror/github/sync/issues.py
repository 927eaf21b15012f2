"""Issues stage: issues of every real-org repository and their history."""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubIssue

from .base import RepoRef, SyncContext, SyncStage
from .enums import SyncStageName
from .issue_history import IssueHistoryStage
from .results import StageResult


class IssuesStage(SyncStage):
    """Page through issues and sync each stored issue's timeline.

    GitHub's issues listing also returns pull requests; records carrying a
    `pull_request` marker are skipped here (the PR stage owns them).
    The incremental rules match the PR stage.
    """

    name = SyncStageName.ISSUES

    def __init__(self, context: SyncContext) -> None:
        super().__init__(context)
        self._history = IssueHistoryStage(self._ctx)

    async def run(self) -> None:
        ctx = self._ctx
        repos = [
            RepoRef.from_model(repo)
            for repo in await ctx.repos.repositories.find_in_real_orgs(ctx.user_id)
        ]
        for repo in repos:
            await self.sync_repository(repo)
        self._logger.info(
            "Issues synced across {} repositories: {} created, {} updated, {} skipped",
            len(repos),
            self.result.created,
            self.result.updated,
            self.result.skipped,
        )

    async def sync_repository(
        self,
        repo: RepoRef,
        *,
        incremental: bool = True,
        limit: int | None = None,
        result: StageResult | None = None,
    ) -> int:
        """Sync the issues (and their history) of one repository.

        Args:
            repo: Repository snapshot
            incremental: Apply `since` and the watermark filter in partial mode
            limit: Maximum issues to store (None for no limit)
            result: Result bucket to record into (defaults to this stage's)

        Returns:
            Number of issues stored
        """
        ctx = self._ctx
        result = result or self.result
        since = ctx.since if incremental else None
        stored = 0

        def limit_reached() -> bool:
            return limit is not None and stored >= limit

        async def handle(page: Page) -> bool:
            nonlocal stored
            records = [GitHubIssue.model_validate(raw) for raw in page.items]
            fresh = [r for r in records if not incremental or ctx.is_fresh(r.updated_at)]
            result.skipped += len(records) - len(fresh)

            for record in fresh:
                if record.is_pull_request:
                    result.skipped += 1
                    continue
                if limit_reached():
                    return False
                issue, created = await ctx.repos.issues.upsert_from_github(
                    ctx.user_id, repo.id, record
                )
                await self.record_upsert(created, result)
                stored += 1
                await self._history.sync_issue(repo, issue.id, record.id, record.number)

            return not limit_reached() and len(fresh) == len(records)

        await self.paginate(
            partial(ctx.client.list_repo_issues, repo.full_name, since=since),
            handle,
            label=f"{repo.full_name} issues",
            result=result,
        )
        return stored
