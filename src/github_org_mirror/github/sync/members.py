"""Organization members stage, capped per organization."""

from __future__ import annotations

from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.github.exceptions import GitHubClientError
from github_org_mirror.schemas.github_api import GitHubAccount, GitHubUserDetail

from .base import OrgRef, SyncStage
from .enums import SyncStageName


class MembersStage(SyncStage):
    """Store up to `member_cap` members per real organization.

    An organization already at the cap is skipped without any API call.
    Otherwise members are paged; those already stored are skipped and new
    ones are enriched with a user-detail lookup until the quota is filled.
    """

    name = SyncStageName.MEMBERS

    async def run(self) -> None:
        ctx = self._ctx
        cap = ctx.config.member_cap
        orgs = [
            OrgRef.from_model(org)
            for org in await ctx.repos.organizations.find_real(ctx.user_id)
        ]
        for org in orgs:
            stored = await ctx.repos.organization_users.count_for_org(ctx.user_id, org.id)
            if stored >= cap:
                self._logger.debug(
                    "Skipping {} members: {} stored, cap is {}", org.login, stored, cap
                )
                self.result.skipped += 1
                continue
            await self._sync_org(org, cap - stored)

        self._logger.info(
            "Members synced across {} orgs: {} created, {} updated",
            len(orgs),
            self.result.created,
            self.result.updated,
        )

    async def _sync_org(self, org: OrgRef, quota: int) -> None:
        ctx = self._ctx
        remaining = quota

        async def handle(page: Page) -> bool:
            nonlocal remaining
            for raw in page.items:
                account = GitHubAccount.model_validate(raw)
                if account.id is None or account.login is None:
                    self.result.skipped += 1
                    continue
                if await ctx.repos.organization_users.exists(ctx.user_id, org.id, account.id):
                    self.result.skipped += 1
                    continue
                try:
                    detail = await ctx.pacer.call_with_backoff(ctx.client.get_user, account.login)
                except GitHubClientError as e:
                    self.result.record_error(f"{org.login} member {account.login}", e)
                    self._logger.warning("Skipping member {}: {}", account.login, e)
                    continue
                member = GitHubUserDetail.model_validate(detail)
                _entity, created = await ctx.repos.organization_users.upsert_from_github(
                    ctx.user_id, org.id, member
                )
                await self.record_upsert(created)
                remaining -= 1
                if remaining <= 0:
                    return False
            return True

        await self.paginate(
            partial(ctx.client.list_org_members, org.login),
            handle,
            label=f"{org.login} members",
        )
