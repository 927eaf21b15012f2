"""Issue history sub-stage: normalized timeline events of one issue."""

from __future__ import annotations

from collections import Counter
from functools import partial

from github_org_mirror.github.client import Page
from github_org_mirror.schemas.github_api import GitHubTimelineEvent

from .base import RepoRef, StageBase
from .enums import SyncStageName
from .normalizer import history_fingerprint, to_history_row


class IssueHistoryStage(StageBase):
    """Fetch, normalize and bulk-upsert an issue's timeline, page by page.

    Not a top-level stage: the issues stage calls `sync_issue` for every
    issue it stores.
    """

    name = SyncStageName.ISSUE_HISTORY

    async def sync_issue(
        self,
        repo: RepoRef,
        issue_id: int,
        issue_external_id: int,
        number: int,
    ) -> int:
        """Sync the timeline of one issue.

        Args:
            repo: Repository of the issue
            issue_id: Local issue ID
            issue_external_id: GitHub issue ID (seeds surrogate event ids)
            number: Issue number

        Returns:
            Number of timeline pages stored
        """
        ctx = self._ctx
        # Spans all pages of the timeline
        seen: Counter[str] = Counter()

        def row_for(event: GitHubTimelineEvent) -> dict:
            fingerprint = history_fingerprint(event)
            occurrence = 0
            if fingerprint is not None:
                occurrence = seen[fingerprint]
                seen[fingerprint] += 1
            return to_history_row(event, issue_external_id, occurrence)

        async def handle(page: Page) -> bool:
            rows = [row_for(GitHubTimelineEvent.model_validate(raw)) for raw in page.items]
            created = await ctx.repos.issue_history.upsert_events(
                ctx.user_id, issue_id, repo.id, rows
            )
            self.result.created += created
            self.result.updated += len(rows) - created
            return True

        return await self.paginate(
            partial(ctx.client.list_issue_timeline, repo.full_name, number),
            handle,
            label=f"{repo.full_name}#{number} timeline",
            history=True,
        )
