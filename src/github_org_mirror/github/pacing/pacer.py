"""Fixed-interval request pacing with a single rate limit backoff.

GitHub signals secondary rate limits with HTTP 403. The sync pipeline
keeps well clear of them by pausing between consecutive pages, and when
one still arrives it waits a long fixed interval and retries the same
request exactly once. A second 403 propagates to the caller.

Backoff state lives only in this object; nothing is persisted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from github_org_mirror.config import SyncConfig, get_settings
from github_org_mirror.github.exceptions import GitHubRateLimitError
from github_org_mirror.logging import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class RequestPacer:
    """Cooperative pauses between GitHub requests.

    Usage:
        pacer = RequestPacer()

        page = await pacer.call_with_backoff(client.list_org_repos, "octo-org", page=1)
        await pacer.pause_between_pages()
    """

    def __init__(self, config: SyncConfig | None = None) -> None:
        """Initialize the pacer.

        Args:
            config: Sync configuration (uses settings if not provided)
        """
        self._config = config or get_settings().sync
        self._total_paused_ms = 0
        self._backoff_count = 0

    @property
    def total_paused_ms(self) -> int:
        """Total milliseconds spent pausing (pages and backoffs)."""
        return self._total_paused_ms

    @property
    def backoff_count(self) -> int:
        """Number of rate limit backoffs taken."""
        return self._backoff_count

    async def pause(self, duration_ms: int) -> None:
        """Suspend the current task for the given duration."""
        if duration_ms <= 0:
            return
        self._total_paused_ms += duration_ms
        await asyncio.sleep(duration_ms / 1000)

    async def pause_between_pages(self) -> None:
        """Nominal delay between consecutive pages of a stage."""
        await self.pause(self._config.page_delay_ms)

    async def pause_between_history_pages(self) -> None:
        """Shorter delay between issue timeline pages."""
        await self.pause(self._config.history_page_delay_ms)

    async def backoff(self) -> None:
        """Wait out a rate limit signal."""
        self._backoff_count += 1
        seconds = self._config.rate_limit_backoff_seconds
        logger.warning("Rate limited by GitHub, pausing {:.0f}s before retrying", seconds)
        await self.pause(int(seconds * 1000))

    async def call_with_backoff(
        self,
        fn: Callable[P, Awaitable[T]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> T:
        """Await a GitHub call, retrying once after a backoff on 403.

        Args:
            fn: Async client method
            *args: Positional arguments for fn
            **kwargs: Keyword arguments for fn

        Returns:
            Result of fn

        Raises:
            GitHubRateLimitError: If the retry is rate limited as well
        """
        try:
            return await fn(*args, **kwargs)
        except GitHubRateLimitError:
            await self.backoff()
        return await fn(*args, **kwargs)
