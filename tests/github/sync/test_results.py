"""Tests for stage and run result objects."""

from datetime import UTC, datetime, timedelta

from github_org_mirror.github.sync.enums import SyncStageName, SyncState
from github_org_mirror.github.sync.results import StageResult, SyncRunResult
from github_org_mirror.schemas.enums import SyncType


class TestStageResult:
    """Tests for per-stage counters."""

    def test_record_upsert(self):
        result = StageResult(stage=SyncStageName.COMMITS)

        result.record_upsert(True)
        result.record_upsert(True)
        result.record_upsert(False)

        assert result.created == 2
        assert result.updated == 1

    def test_recorded_error_keeps_context(self):
        """Errors name the entity and the exception type."""
        result = StageResult(stage=SyncStageName.PULL_REQUESTS)

        result.record_error("acme/api pull requests page 2", RuntimeError("boom"))

        assert result.errors == ["acme/api pull requests page 2: RuntimeError: boom"]
        assert result.success is False
        assert result.failed is False

    def test_duration(self):
        start = datetime(2024, 1, 15, tzinfo=UTC)
        result = StageResult(
            stage=SyncStageName.ISSUES,
            started_at=start,
            completed_at=start + timedelta(seconds=90),
        )

        assert result.duration_seconds == 90.0
        assert StageResult(stage=SyncStageName.ISSUES).duration_seconds == 0.0


class TestSyncRunResult:
    """Tests for the aggregate run result."""

    def test_stage_bucket_created_once(self):
        run = SyncRunResult(user_id=1)

        first = run.stage(SyncStageName.MEMBERS)
        second = run.stage(SyncStageName.MEMBERS)

        assert first is second

    def test_totals_and_failed_stages(self):
        run = SyncRunResult(user_id=1)
        run.stage(SyncStageName.ORGANIZATIONS).created = 2
        commits = run.stage(SyncStageName.COMMITS)
        commits.updated = 5
        commits.failed = True
        commits.record_error("commits", RuntimeError("boom"))

        assert run.total_created == 2
        assert run.total_updated == 5
        assert run.total_errors == 1
        assert run.failed_stages == [SyncStageName.COMMITS]

    def test_to_dict(self):
        run = SyncRunResult(user_id=1, sync_type=SyncType.PARTIAL, state=SyncState.COMPLETED)
        run.stage(SyncStageName.ISSUES).created = 3

        data = run.to_dict()

        assert data["summary"]["user_id"] == 1
        assert data["summary"]["sync_type"] == "partial"
        assert data["summary"]["state"] == "completed"
        assert data["summary"]["total_created"] == 3
        assert data["stages"][0]["stage"] == "issues"
        assert data["stages"][0]["success"] is True
