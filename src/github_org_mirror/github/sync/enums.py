"""Enums for sync operations."""

from enum import Enum


class SyncStageName(str, Enum):
    """Stages of an organization sync run, in execution order."""

    ORGANIZATIONS = "organizations"
    REPOSITORIES = "repositories"
    COMMITS = "commits"
    PULL_REQUESTS = "pull_requests"
    ISSUES = "issues"
    ISSUE_HISTORY = "issue_history"
    """Runs inside the issues stage, once per issue."""

    MEMBERS = "members"
    CURATED = "curated"


class SyncState(str, Enum):
    """Lifecycle of a single orchestrator."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
