"""Integration tests for the CLI.

These tests verify end-to-end flows:
- Real database operations (temporary SQLite file)
- Fake GitHub API (httpx.MockTransport)
- The actual orchestrator and stages

This differs from test_cli_sync.py which mocks the sync run entirely.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, func, select, update
from sqlalchemy.orm import Session
from typer.testing import CliRunner

from github_org_mirror.cli.app import app
from github_org_mirror.config import get_settings
from github_org_mirror.db.models import Issue, PullRequest, User
from github_org_mirror.logging import reset_logging
from tests.fixtures.fake_github import FakeGitHub, seed_acme

runner = CliRunner()


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the application at a temporary database with pauses disabled."""
    path = tmp_path / "mirror.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{path}")
    monkeypatch.setenv("SYNC__PAGE_DELAY_MS", "0")
    monkeypatch.setenv("SYNC__HISTORY_PAGE_DELAY_MS", "0")
    monkeypatch.setenv("SYNC__RATE_LIMIT_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("SYNC__EXTRA_REPOS", "[]")
    get_settings.cache_clear()
    with (
        patch("github_org_mirror.db.engine._engine", None),
        patch("github_org_mirror.db.engine._async_session_factory", None),
    ):
        yield path
    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def initialized_db(db_path):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0, result.output
    return db_path


@pytest.fixture
def registered_user(initialized_db):
    result = runner.invoke(app, ["users", "add", "octocat", "--token", "ghp_cli_token"])
    assert result.exit_code == 0, result.output
    return initialized_db


def query(db_path, stmt):
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with Session(engine) as session:
            return session.execute(stmt).all()
    finally:
        engine.dispose()


def execute(db_path, stmt) -> None:
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with Session(engine) as session:
            session.execute(stmt)
            session.commit()
    finally:
        engine.dispose()


# -----------------------------------------------------------------------------
# db / users
# -----------------------------------------------------------------------------
class TestDatabaseCommands:
    def test_init_is_repeatable(self, initialized_db):
        result = runner.invoke(app, ["db", "init"])

        assert result.exit_code == 0
        assert "Database initialized" in result.output

    def test_stats_for_empty_user(self, registered_user):
        result = runner.invoke(app, ["db", "stats", "1", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"pull_request": 0' in result.output
        assert '"issue_history": 0' in result.output

    def test_database_url_option_overrides_environment(self, db_path, tmp_path):
        other = tmp_path / "other.db"

        result = runner.invoke(
            app, ["--database-url", f"sqlite+aiosqlite:///{other}", "db", "init"]
        )

        assert result.exit_code == 0, result.output
        assert other.exists()
        assert not db_path.exists()

    def test_migrate_without_config(self, db_path, tmp_path):
        result = runner.invoke(app, ["db", "migrate", "--config", str(tmp_path / "missing.ini")])

        assert result.exit_code == 1
        # Rich wraps long paths at terminal width
        assert "not found" in " ".join(result.output.split())


class TestUserCommands:
    def test_add_then_list(self, registered_user):
        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 0
        assert "octocat" in result.output
        assert "never" in result.output

    def test_add_existing_replaces_token(self, registered_user):
        result = runner.invoke(app, ["users", "add", "octocat", "--token", "ghp_rotated"])

        assert result.exit_code == 0
        assert "Updated token" in result.output
        rows = query(registered_user, select(User.login, User.access_token))
        assert rows == [("octocat", "ghp_rotated")]

    def test_token_from_environment(self, initialized_db, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_from_env")

        result = runner.invoke(app, ["users", "add", "hubot"])

        assert result.exit_code == 0, result.output
        assert query(initialized_db, select(User.access_token)) == [("ghp_from_env",)]

    def test_list_without_users(self, initialized_db):
        result = runner.invoke(app, ["users", "list"])

        assert "No users registered" in result.output


# -----------------------------------------------------------------------------
# sync
# -----------------------------------------------------------------------------
class TestSyncIntegration:
    def test_run_mirrors_into_database(self, registered_user):
        fake = FakeGitHub()
        seed_acme(fake)

        with patch(
            "github_org_mirror.github.sync.orchestrator.GitHubClient", fake.client_factory
        ):
            result = runner.invoke(app, ["sync", "run", "1", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"state": "completed"' in result.output
        assert fake.tokens == ["ghp_cli_token"]
        assert query(registered_user, select(func.count()).select_from(PullRequest)) == [(1,)]
        assert query(registered_user, select(func.count()).select_from(Issue)) == [(1,)]
        [(in_progress, synced_at)] = query(
            registered_user, select(User.sync_in_progress, User.last_synced_at)
        )
        assert in_progress is False
        assert synced_at is not None

    def test_status_after_run(self, registered_user):
        fake = FakeGitHub()
        seed_acme(fake)
        with patch(
            "github_org_mirror.github.sync.orchestrator.GitHubClient", fake.client_factory
        ):
            runner.invoke(app, ["sync", "run", "1"])

        result = runner.invoke(app, ["sync", "status", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert '"login": "octocat"' in result.output
        assert '"sync_type": "full"' in result.output

    def test_run_refused_while_in_progress(self, registered_user):
        execute(registered_user, update(User).values(sync_in_progress=True))
        fake = FakeGitHub()

        with patch(
            "github_org_mirror.github.sync.orchestrator.GitHubClient", fake.client_factory
        ):
            result = runner.invoke(app, ["sync", "run", "1"])

        assert result.exit_code == 1
        assert "already in progress" in result.output
        assert fake.requests == []

    def test_run_unknown_user(self, initialized_db):
        result = runner.invoke(app, ["sync", "run", "42"])

        assert result.exit_code == 1
        assert "User 42 not found" in result.output
