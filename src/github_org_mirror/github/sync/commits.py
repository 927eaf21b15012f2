"""Commits stage: default-branch commits of every real-org repository."""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubCommit

from .base import RepoRef, SyncStage
from .enums import SyncStageName


class CommitsStage(SyncStage):
    """Page through each repository's commits.

    In partial mode the watermark is passed to GitHub as `since`, so only
    newer commits are returned.
    """

    name = SyncStageName.COMMITS

    async def run(self) -> None:
        ctx = self._ctx
        repos = [
            RepoRef.from_model(repo)
            for repo in await ctx.repos.repositories.find_in_real_orgs(ctx.user_id)
        ]
        for repo in repos:
            await self.paginate(
                partial(ctx.client.list_repo_commits, repo.full_name, since=ctx.since),
                partial(self._handle_page, repo),
                label=f"{repo.full_name} commits",
            )
        self._logger.info(
            "Commits synced across {} repositories: {} created, {} updated",
            len(repos),
            self.result.created,
            self.result.updated,
        )

    async def _handle_page(self, repo: RepoRef, page: Page) -> bool:
        ctx = self._ctx
        for raw in page.items:
            commit = GitHubCommit.model_validate(raw)
            _entity, created = await ctx.repos.commits.upsert_from_github(
                ctx.user_id, repo.id, commit
            )
            await self.record_upsert(created)
        return True
