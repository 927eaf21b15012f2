"""Pull requests stage, including the per-PR commits sub-stage."""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubCommit, GitHubPullRequest

from .base import RepoRef, SyncStage
from .enums import SyncStageName
from .results import StageResult


class PullRequestsStage(SyncStage):
    """Page through pull requests, most recently updated first.

    In partial mode PRs not updated after the watermark are dropped, and
    paging stops at the first page where anything was dropped (the listing
    is sorted by update time, so later pages are older still).
    """

    name = SyncStageName.PULL_REQUESTS

    async def run(self) -> None:
        ctx = self._ctx
        repos = [
            RepoRef.from_model(repo)
            for repo in await ctx.repos.repositories.find_in_real_orgs(ctx.user_id)
        ]
        for repo in repos:
            await self.sync_repository(repo)
        self._logger.info(
            "Pull requests synced across {} repositories: {} created, {} updated",
            len(repos),
            self.result.created,
            self.result.updated,
        )

    async def sync_repository(
        self,
        repo: RepoRef,
        *,
        include_commits: bool = True,
        incremental: bool = True,
        limit: int | None = None,
        result: StageResult | None = None,
    ) -> int:
        """Sync the pull requests of one repository.

        Args:
            repo: Repository snapshot
            include_commits: Fetch and store each PR's commits
            incremental: Apply the watermark filter in partial mode
            limit: Maximum PRs to store (None for no limit)
            result: Result bucket to record into (defaults to this stage's)

        Returns:
            Number of PRs stored
        """
        ctx = self._ctx
        result = result or self.result
        stored = 0

        def limit_reached() -> bool:
            return limit is not None and stored >= limit

        async def handle(page: Page) -> bool:
            nonlocal stored
            pulls = [GitHubPullRequest.model_validate(raw) for raw in page.items]
            fresh = [pr for pr in pulls if not incremental or ctx.is_fresh(pr.updated_at)]
            result.skipped += len(pulls) - len(fresh)

            for pr in fresh:
                if limit_reached():
                    return False
                commit_shas = (
                    await self._sync_commits(repo, pr.number, result) if include_commits else None
                )
                _entity, created = await ctx.repos.pull_requests.upsert_from_github(
                    ctx.user_id, repo.id, pr, commit_shas
                )
                await self.record_upsert(created, result)
                stored += 1

            return not limit_reached() and len(fresh) == len(pulls)

        await self.paginate(
            partial(ctx.client.list_repo_pulls, repo.full_name),
            handle,
            label=f"{repo.full_name} pull requests",
            result=result,
        )
        return stored

    async def _sync_commits(
        self, repo: RepoRef, number: int, result: StageResult
    ) -> list[str] | None:
        """Store the commits of one PR and return their SHAs in order.

        Returns None when a commits page failed, so the PR keeps the list
        stored by an earlier run instead of a truncated one.
        """
        ctx = self._ctx
        shas: list[str] = []
        errors_before = len(result.errors)

        async def handle(page: Page) -> bool:
            for raw in page.items:
                commit = GitHubCommit.model_validate(raw)
                await ctx.repos.commits.upsert_from_github(ctx.user_id, repo.id, commit)
                await ctx.commit_manager.record_success()
                shas.append(commit.sha)
            return True

        await self.paginate(
            partial(ctx.client.list_pull_commits, repo.full_name, number),
            handle,
            label=f"{repo.full_name}#{number} commits",
            result=result,
        )
        if len(result.errors) > errors_before:
            return None
        return shas
