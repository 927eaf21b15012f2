"""Organization sync pipeline.

This module provides:
- GitHubSyncOrchestrator: Runs every stage for one user
- Stages: organizations, repositories, commits, pull requests, issues
  (with issue history), members and curated repositories
- normalize_event: Timeline event normalization
- SyncStatusReporter: Per-user status summary
"""

from .base import (
    OrgRef,
    RepoRef,
    StageBase,
    SyncContext,
    SyncRepositories,
    SyncStage,
)
from .commit_manager import CommitManager
from .commits import CommitsStage
from .curated import CuratedStage
from .enums import OutputFormat, SyncStageName, SyncState
from .exceptions import (
    MissingCredentialError,
    SyncError,
    SyncInProgressError,
    UserNotFoundError,
)
from .issue_history import IssueHistoryStage
from .issues import IssuesStage
from .members import MembersStage
from .normalizer import (
    HANDLED_KINDS,
    NormalizedEvent,
    history_external_id,
    history_fingerprint,
    normalize_event,
    to_history_row,
)
from .orchestrator import GitHubSyncOrchestrator
from .organizations import OrganizationsStage
from .pull_requests import PullRequestsStage
from .repositories import RepositoriesStage
from .results import StageResult, SyncRunResult
from .status import SyncStatusReporter

__all__ = [
    # Orchestration
    "CommitManager",
    "GitHubSyncOrchestrator",
    "SyncContext",
    "SyncRepositories",
    # Stages
    "CommitsStage",
    "CuratedStage",
    "IssueHistoryStage",
    "IssuesStage",
    "MembersStage",
    "OrganizationsStage",
    "PullRequestsStage",
    "RepositoriesStage",
    "StageBase",
    "SyncStage",
    "OrgRef",
    "RepoRef",
    # Enums
    "OutputFormat",
    "SyncStageName",
    "SyncState",
    # Errors
    "MissingCredentialError",
    "SyncError",
    "SyncInProgressError",
    "UserNotFoundError",
    # Normalization
    "HANDLED_KINDS",
    "NormalizedEvent",
    "history_external_id",
    "history_fingerprint",
    "normalize_event",
    "to_history_row",
    # Results
    "StageResult",
    "SyncRunResult",
    # Status
    "SyncStatusReporter",
]
