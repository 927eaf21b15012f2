"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from github_org_mirror.schemas.enums import SyncType

from .enums import SyncStageName, SyncState


@dataclass
class StageResult:
    """Counters and errors collected by one stage of a run.

    Per-page failures are appended to `errors` while the stage keeps going;
    `failed` is set only when the stage itself aborted.
    """

    stage: SyncStageName
    """Which stage produced this result."""

    created: int = 0
    """Rows inserted."""

    updated: int = 0
    """Existing rows overwritten."""

    skipped: int = 0
    """Records deliberately not stored (PR markers, caps, known members)."""

    pages: int = 0
    """Pages fetched and committed."""

    errors: list[str] = field(default_factory=list)
    """Per-page and per-entity failures."""

    failed: bool = False
    """True if an exception escaped the stage."""

    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def success(self) -> bool:
        """Check if the stage completed without any recorded error."""
        return not self.failed and not self.errors

    @property
    def duration_seconds(self) -> float:
        """Wall time of the stage (0 if it never ran)."""
        if self.started_at is None or self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def record_upsert(self, created: bool) -> None:
        """Count one upsert outcome."""
        if created:
            self.created += 1
        else:
            self.updated += 1

    def record_error(self, context: str, error: BaseException) -> None:
        """Remember a failure with the entity it happened on."""
        self.errors.append(f"{context}: {type(error).__name__}: {error}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "stage": self.stage.value,
            "success": self.success,
            "failed": self.failed,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "pages": self.pages,
            "errors": list(self.errors),
            "duration_seconds": round(self.duration_seconds, 2),
        }


@dataclass
class SyncRunResult:
    """Aggregate outcome of one orchestrator run."""

    user_id: int
    sync_type: SyncType | None = None
    state: SyncState = SyncState.IDLE
    stages: dict[SyncStageName, StageResult] = field(default_factory=dict)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    error: str | None = None
    """Set when the run itself failed (initialization or an escaped exception)."""

    def stage(self, name: SyncStageName) -> StageResult:
        """Get (or create) the result bucket for a stage."""
        if name not in self.stages:
            self.stages[name] = StageResult(stage=name)
        return self.stages[name]

    @property
    def failed_stages(self) -> list[SyncStageName]:
        """Stages that aborted."""
        return [name for name, result in self.stages.items() if result.failed]

    @property
    def total_created(self) -> int:
        return sum(r.created for r in self.stages.values())

    @property
    def total_updated(self) -> int:
        return sum(r.updated for r in self.stages.values())

    @property
    def total_errors(self) -> int:
        return sum(len(r.errors) for r in self.stages.values())

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "user_id": self.user_id,
                "state": self.state.value,
                "sync_type": self.sync_type.value if self.sync_type else None,
                "total_created": self.total_created,
                "total_updated": self.total_updated,
                "total_errors": self.total_errors,
                "failed_stages": [s.value for s in self.failed_stages],
                "started_at": self.started_at.isoformat(),
                "completed_at": self.completed_at.isoformat() if self.completed_at else None,
                "duration_seconds": round(self.duration_seconds, 2),
                "error": self.error,
            },
            "stages": [r.to_dict() for r in self.stages.values()],
        }
