"""Tests for sync CLI commands with the sync run mocked out."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from github_org_mirror.cli.app import app
from github_org_mirror.github.sync import (
    SyncInProgressError,
    SyncRunResult,
    SyncStageName,
    SyncState,
    UserNotFoundError,
)
from github_org_mirror.logging import reset_logging
from github_org_mirror.schemas.enums import SyncType

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_logging():
    """Each invocation configures loguru; drop its sinks afterwards."""
    yield
    reset_logging()


@pytest.fixture
def run_result() -> dict:
    """A completed run with one partially failed stage."""
    result = SyncRunResult(user_id=1, sync_type=SyncType.FULL, state=SyncState.COMPLETED)
    result.stage(SyncStageName.ORGANIZATIONS).created = 2
    commits = result.stage(SyncStageName.COMMITS)
    commits.created = 40
    commits.pages = 3
    commits.record_error("acme/api commits page 3", RuntimeError("boom"))
    return result.to_dict()


class TestGlobalFlags:
    """Tests for global CLI flags (--verbose, --quiet, --version)."""

    def test_global_help_shows_flags(self):
        result = runner.invoke(app, ["--help"])
        assert "--verbose" in result.stdout
        assert "--quiet" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "ghmirror version" in result.stdout


class TestSyncRunCommand:
    """Tests for the 'sync run' command."""

    def test_command_exists(self):
        result = runner.invoke(app, ["sync", "run", "--help"])
        assert result.exit_code == 0
        assert "Mirror every organization" in result.stdout

    def test_requires_user_id(self):
        result = runner.invoke(app, ["sync", "run"])
        assert result.exit_code != 0

    def test_text_output(self, run_result):
        with patch("github_org_mirror.cli.sync._run_sync", AsyncMock(return_value=run_result)):
            result = runner.invoke(app, ["sync", "run", "1"])

        assert result.exit_code == 0, result.output
        assert "Sync Complete" in result.output
        assert "commits" in result.output
        assert "acme/api commits page 3" in result.output

    def test_json_output(self, run_result):
        with patch("github_org_mirror.cli.sync._run_sync", AsyncMock(return_value=run_result)):
            result = runner.invoke(app, ["sync", "run", "1", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"sync_type": "full"' in result.output
        assert '"total_created": 42' in result.output

    def test_rejects_run_in_progress(self):
        mock = AsyncMock(side_effect=SyncInProgressError(1))
        with patch("github_org_mirror.cli.sync._run_sync", mock):
            result = runner.invoke(app, ["sync", "run", "1"])

        assert result.exit_code == 1
        assert "Sync failed" in result.output
        assert "already in progress" in result.output

    def test_unknown_user(self):
        mock = AsyncMock(side_effect=UserNotFoundError(7))
        with patch("github_org_mirror.cli.sync._run_sync", mock):
            result = runner.invoke(app, ["sync", "run", "7"])

        assert result.exit_code == 1
        assert "User 7 not found" in result.output
