"""Pydantic schemas for GitHub Org Mirror.

This module provides GitHub payload parsing and output serialization models.
"""

from .base import SchemaBase, ensure_utc
from .enums import SyncType
from .github_api import (
    GitHubAccount,
    GitHubCommit,
    GitHubCommitDetail,
    GitHubGitActor,
    GitHubIssue,
    GitHubLabel,
    GitHubOrganization,
    GitHubPullRequest,
    GitHubReactions,
    GitHubRepository,
    GitHubTimelineEvent,
    GitHubUserDetail,
    GitHubVerification,
)
from .status import SyncStatusEntry, UserRead

__all__ = [
    # Base
    "SchemaBase",
    "ensure_utc",
    # Enums
    "SyncType",
    # GitHub API
    "GitHubAccount",
    "GitHubCommit",
    "GitHubCommitDetail",
    "GitHubGitActor",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubOrganization",
    "GitHubPullRequest",
    "GitHubReactions",
    "GitHubRepository",
    "GitHubTimelineEvent",
    "GitHubUserDetail",
    "GitHubVerification",
    # Status
    "SyncStatusEntry",
    "UserRead",
]
