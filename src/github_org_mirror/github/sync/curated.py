"""Curated external repositories stage.

A fixed allow-list of popular public repositories is mirrored once per
user under the synthetic OpenSource organization. Volume is bounded by
global PR and issue budgets shared across the whole list.
"""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubAccount, GitHubRepository

from .base import OrgRef, RepoRef, SyncContext, SyncStage
from .enums import SyncStageName
from .issues import IssuesStage
from .pull_requests import PullRequestsStage


class CuratedStage(SyncStage):
    """Fetch detail, contributors, PRs and issues of the allow-listed repositories.

    Short-circuits when any allow-listed repository is already stored for
    the user. Errors are isolated per repository. PR commits are not
    fetched; issue history is.
    """

    name = SyncStageName.CURATED

    def __init__(self, context: SyncContext) -> None:
        super().__init__(context)
        self._pulls = PullRequestsStage(context)
        self._issues = IssuesStage(context)

    async def run(self) -> None:
        ctx = self._ctx
        full_names = list(ctx.config.extra_repos)
        if not full_names:
            return
        if await ctx.repos.repositories.any_with_full_names(ctx.user_id, full_names):
            self._logger.info("Curated repositories already mirrored, skipping")
            self.result.skipped += len(full_names)
            return

        org = OrgRef.from_model(await ctx.repos.organizations.ensure_open_source(ctx.user_id))
        await ctx.commit_manager.commit()

        pr_budget = ctx.config.extra_pr_cap
        issue_budget = ctx.config.extra_issue_cap
        for full_name in full_names:
            if pr_budget <= 0 and issue_budget <= 0:
                self._logger.info("Curated PR and issue caps reached, stopping")
                break
            log = self.repo_logger(full_name)
            try:
                repo = await self._sync_detail(org, full_name)
                await self._sync_contributors(org, repo)
                if pr_budget > 0:
                    pr_budget -= await self._pulls.sync_repository(
                        repo,
                        include_commits=False,
                        incremental=False,
                        limit=pr_budget,
                        result=self.result,
                    )
                if issue_budget > 0:
                    issue_budget -= await self._issues.sync_repository(
                        repo,
                        incremental=False,
                        limit=issue_budget,
                        result=self.result,
                    )
                await ctx.commit_manager.commit()
                log.info("Mirrored curated repository")
            except Exception as e:
                await ctx.commit_manager.rollback()
                self.result.record_error(full_name, e)
                log.warning("Failed to mirror curated repository: {}", e)

    async def _sync_detail(self, org: OrgRef, full_name: str) -> RepoRef:
        ctx = self._ctx
        detail = await ctx.pacer.call_with_backoff(ctx.client.get_repo, full_name)
        repo, created = await ctx.repos.repositories.upsert_from_github(
            ctx.user_id, org.id, GitHubRepository.model_validate(detail)
        )
        await self.record_upsert(created)
        return RepoRef.from_model(repo)

    async def _sync_contributors(self, org: OrgRef, repo: RepoRef) -> None:
        """Store contributors as OpenSource org users.

        Every curated repository shares the OpenSource org, so the member
        cap bounds the org as a whole: the quota starts from what earlier
        repositories (and earlier runs) already stored.
        """
        ctx = self._ctx
        members = ctx.repos.organization_users
        cap = ctx.config.member_cap
        stored = await members.count_for_org(ctx.user_id, org.id)
        if stored >= cap:
            self.result.skipped += 1
            return

        async def handle(page: Page) -> bool:
            nonlocal stored
            for raw in page.items:
                if stored >= cap:
                    return False
                account = GitHubAccount.model_validate(raw)
                if account.id is None:
                    # Anonymous contributors have no account
                    continue
                if await members.exists(ctx.user_id, org.id, account.id):
                    self.result.skipped += 1
                    continue
                _entity, created = await members.upsert_from_github(ctx.user_id, org.id, account)
                await self.record_upsert(created)
                stored += 1
            return stored < cap

        await self.paginate(
            partial(ctx.client.list_repo_contributors, repo.full_name),
            handle,
            label=f"{repo.full_name} contributors",
        )
