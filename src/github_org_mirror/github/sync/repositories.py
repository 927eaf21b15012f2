"""Repositories stage: every repository of the user's real organizations."""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubRepository

from .base import OrgRef, SyncStage
from .enums import SyncStageName


class RepositoriesStage(SyncStage):
    """Page through each organization's repositories and upsert them."""

    name = SyncStageName.REPOSITORIES

    async def run(self) -> None:
        ctx = self._ctx
        orgs = [
            OrgRef.from_model(org)
            for org in await ctx.repos.organizations.find_real(ctx.user_id)
        ]
        for org in orgs:
            await self.paginate(
                partial(ctx.client.list_org_repos, org.login),
                partial(self._handle_page, org),
                label=f"{org.login} repositories",
            )
        self._logger.info(
            "Repositories synced across {} orgs: {} created, {} updated",
            len(orgs),
            self.result.created,
            self.result.updated,
        )

    async def _handle_page(self, org: OrgRef, page: Page) -> bool:
        ctx = self._ctx
        for raw in page.items:
            repo = GitHubRepository.model_validate(raw)
            _entity, created = await ctx.repos.repositories.upsert_from_github(
                ctx.user_id, org.id, repo
            )
            await self.record_upsert(created)
        return True
