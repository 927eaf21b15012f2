"""Organizations stage: the orgs visible to the user's credential."""

from __future__ import annotations

from github_org_mirror.github.client import Page
from github_org_mirror.github.exceptions import GitHubClientError
from github_org_mirror.schemas.github_api import GitHubOrganization

from .base import SyncStage
from .enums import SyncStageName


class OrganizationsStage(SyncStage):
    """List the credential's organizations and upsert each one's detail record."""

    name = SyncStageName.ORGANIZATIONS

    async def run(self) -> None:
        await self.paginate(
            self._ctx.client.list_user_orgs,
            self._handle_page,
            label="user organizations",
        )
        self._logger.info(
            "Organizations synced: {} created, {} updated",
            self.result.created,
            self.result.updated,
        )

    async def _handle_page(self, page: Page) -> bool:
        ctx = self._ctx
        for raw in page.items:
            summary = GitHubOrganization.model_validate(raw)
            try:
                detail = await ctx.pacer.call_with_backoff(ctx.client.get_org, summary.login)
            except GitHubClientError as e:
                # e.g. SAML-enforced orgs; the rest of the page still syncs
                self.result.record_error(summary.login, e)
                self._logger.warning("Skipping org {}: {}", summary.login, e)
                continue
            org = GitHubOrganization.model_validate(detail)
            _entity, created = await ctx.repos.organizations.upsert_from_github(ctx.user_id, org)
            await self.record_upsert(created)
        return True
