"""GitHub API access and the organization sync pipeline.

This module provides:
- GitHubClient: Async GitHub REST client (one page per call)
- RequestPacer: Inter-page delays and the 403 backoff/retry
- GitHubSyncOrchestrator: Multi-stage sync for one user
"""

from .client import GitHubClient, Page
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRetryableError,
)
from .pacing import RequestPacer
from .sync import (
    GitHubSyncOrchestrator,
    OutputFormat,
    StageResult,
    SyncRunResult,
    SyncStatusReporter,
)

__all__ = [
    # Client
    "GitHubClient",
    "Page",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    # Pacing
    "RequestPacer",
    # Sync
    "GitHubSyncOrchestrator",
    "OutputFormat",
    "StageResult",
    "SyncRunResult",
    "SyncStatusReporter",
]
