"""Async GitHub REST API client built on httpx.

This module provides a thin async interface to the GitHub REST API endpoints
consumed by the organization sync pipeline. Every list endpoint is fetched one
page at a time so callers own the pagination loop and its termination rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httpx

from github_org_mirror.config import get_settings
from github_org_mirror.logging import get_logger
from github_org_mirror.schemas.base import ensure_utc

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)

# Truncate error bodies in exception messages; the full body stays on the error
_MAX_BODY_IN_MESSAGE = 200


@dataclass
class Page:
    """A single page from a paginated GitHub list endpoint."""

    items: list[dict[str, Any]] = field(default_factory=list)
    """Raw records returned for this page."""

    page: int = 1
    """1-based page number that was requested."""

    per_page: int = 100
    """Page size that was requested."""

    @property
    def raw_count(self) -> int:
        """Number of records the provider returned (before any filtering)."""
        return len(self.items)

    @property
    def is_last(self) -> bool:
        """A short page is GitHub's implicit end-of-data signal."""
        return self.raw_count < self.per_page


class GitHubClient:
    """Async GitHub API client for the sync pipeline.

    Usage:
        async with GitHubClient(token) as client:
            page = await client.list_org_repos("octo-org", page=1, per_page=100)
            for raw_repo in page.items:
                print(raw_repo["full_name"])

    The client never retries. Rate limit backoff is applied by the
    orchestrator through RequestPacer.
    """

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub access token of the user being synced.
            base_url: API base URL (uses settings if not provided)
            api_version: Value for X-GitHub-Api-Version (uses settings if not provided)
            timeout: Request timeout in seconds (uses settings if not provided)
            transport: Optional httpx transport (used by tests to fake the API)

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        if not token:
            raise GitHubAuthenticationError("GitHub access token required.")
        settings = get_settings()
        self._token = token
        self._base_url = (base_url or settings.github_api_url).rstrip("/")
        self._api_version = api_version or settings.github_api_version
        self._timeout = timeout or settings.github_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def _http(self) -> httpx.AsyncClient:
        """Get or create the httpx client instance."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": self._api_version,
                    "User-Agent": "github-org-mirror",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Generic Access
    # -------------------------------------------------------------------------
    async def fetch_page(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        page: int = 1,
        per_page: int = 100,
    ) -> Page:
        """Fetch one page of a list endpoint.

        Args:
            path: API path (e.g., "/orgs/octo-org/repos")
            params: Extra query parameters (filters, sort)
            page: 1-based page number
            per_page: Requested page size

        Returns:
            Page with the raw records

        Raises:
            GitHubClientError: On HTTP failure or a non-list payload
        """
        query = {**(params or {}), "page": page, "per_page": per_page}
        data = await self._get(path, query)
        if data is None:
            # 204 No Content (e.g., contributors of an empty repository)
            data = []
        if not isinstance(data, list):
            raise GitHubClientError(
                f"Expected a list from {path}, got {type(data).__name__}"
            )
        logger.debug("Fetched {} page {}: {} items", path, page, len(data))
        return Page(items=data, page=page, per_page=per_page)

    async def fetch_one(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Fetch a single-object endpoint.

        Args:
            path: API path (e.g., "/repos/octo-org/api")
            params: Optional query parameters

        Returns:
            The decoded JSON object
        """
        data = await self._get(path, params)
        if not isinstance(data, dict):
            raise GitHubClientError(
                f"Expected an object from {path}, got {type(data).__name__}"
            )
        return data

    async def _get(self, path: str, params: dict[str, Any] | None) -> Any:
        """Issue a GET request and decode the JSON body."""
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise GitHubClientError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            raise self._handle_error(path, response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GitHubClientError(
                f"Invalid JSON from {path}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    # -------------------------------------------------------------------------
    # Organizations & Users
    # -------------------------------------------------------------------------
    async def list_user_orgs(self, *, page: int = 1, per_page: int = 100) -> Page:
        """List organizations visible to the authenticated user."""
        return await self.fetch_page("/user/orgs", page=page, per_page=per_page)

    async def get_org(self, org: str) -> dict[str, Any]:
        """Get the detailed organization record."""
        return await self.fetch_one(f"/orgs/{org}")

    async def list_org_repos(self, org: str, *, page: int = 1, per_page: int = 100) -> Page:
        """List every repository of an organization the user can see."""
        return await self.fetch_page(
            f"/orgs/{org}/repos", {"type": "all"}, page=page, per_page=per_page
        )

    async def list_org_members(self, org: str, *, page: int = 1, per_page: int = 100) -> Page:
        """List organization members (summary records)."""
        return await self.fetch_page(f"/orgs/{org}/members", page=page, per_page=per_page)

    async def get_user(self, login: str) -> dict[str, Any]:
        """Get the detailed public profile for a user."""
        return await self.fetch_one(f"/users/{login}")

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------
    async def get_repo(self, full_name: str) -> dict[str, Any]:
        """Get the detailed repository record."""
        return await self.fetch_one(f"/repos/{full_name}")

    async def list_repo_contributors(
        self, full_name: str, *, page: int = 1, per_page: int = 100
    ) -> Page:
        """List contributors of a repository."""
        return await self.fetch_page(
            f"/repos/{full_name}/contributors", page=page, per_page=per_page
        )

    async def list_repo_commits(
        self,
        full_name: str,
        *,
        since: datetime | None = None,
        page: int = 1,
        per_page: int = 100,
    ) -> Page:
        """List commits on the default branch, optionally newer than `since`."""
        params: dict[str, Any] = {}
        if since is not None:
            params["since"] = _isoformat(since)
        return await self.fetch_page(
            f"/repos/{full_name}/commits", params, page=page, per_page=per_page
        )

    # -------------------------------------------------------------------------
    # Pull Requests
    # -------------------------------------------------------------------------
    async def list_repo_pulls(
        self, full_name: str, *, page: int = 1, per_page: int = 100
    ) -> Page:
        """List pull requests in every state, most recently updated first."""
        return await self.fetch_page(
            f"/repos/{full_name}/pulls",
            {"state": "all", "sort": "updated", "direction": "desc"},
            page=page,
            per_page=per_page,
        )

    async def list_pull_commits(
        self, full_name: str, number: int, *, page: int = 1, per_page: int = 100
    ) -> Page:
        """List commits that make up a pull request."""
        return await self.fetch_page(
            f"/repos/{full_name}/pulls/{number}/commits", page=page, per_page=per_page
        )

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------
    async def list_repo_issues(
        self,
        full_name: str,
        *,
        since: datetime | None = None,
        page: int = 1,
        per_page: int = 100,
    ) -> Page:
        """List issues (and pull requests) most recently updated first.

        Note: GitHub returns pull requests through this endpoint too. They
        carry a `pull_request` key and must be filtered out by the caller.
        """
        params: dict[str, Any] = {"state": "all", "sort": "updated", "direction": "desc"}
        if since is not None:
            params["since"] = _isoformat(since)
        return await self.fetch_page(
            f"/repos/{full_name}/issues", params, page=page, per_page=per_page
        )

    async def list_issue_timeline(
        self, full_name: str, number: int, *, page: int = 1, per_page: int = 100
    ) -> Page:
        """List timeline events of an issue in chronological order."""
        return await self.fetch_page(
            f"/repos/{full_name}/issues/{number}/timeline", page=page, per_page=per_page
        )

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, path: str, response: httpx.Response) -> GitHubClientError:
        """Convert an error response to our custom exceptions."""
        status = response.status_code
        body = response.text
        snippet = body[:_MAX_BODY_IN_MESSAGE]

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token", status, body)
        elif status == 403:
            remaining = response.headers.get("x-ratelimit-remaining")
            reset = response.headers.get("x-ratelimit-reset")
            detail = f" (remaining={remaining}, reset={reset})" if remaining is not None else ""
            return GitHubRateLimitError(
                f"GitHub rate limit or access denial on {path}{detail}: {snippet}",
                status,
                body,
            )
        elif status == 404:
            return GitHubNotFoundError(f"{path} not found", status, body)
        else:
            return GitHubClientError(
                f"GitHub API error ({status}) on {path}: {snippet}", status, body
            )


def _isoformat(value: datetime) -> str:
    """Format a datetime the way GitHub expects for `since` filters."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")
