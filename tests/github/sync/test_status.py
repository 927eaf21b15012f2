"""Tests for SyncStatusReporter."""

from github_org_mirror.github.sync import SyncStatusReporter
from github_org_mirror.schemas.enums import SyncType
from tests.conftest import JAN_15
from tests.factories import make_user


class TestSyncStatusReporter:
    async def test_no_users(self, db_session):
        assert await SyncStatusReporter(db_session).get_status() == []

    async def test_one_entry_per_user(self, db_session):
        make_user(db_session, login="octocat")
        make_user(
            db_session,
            login="hubot",
            last_synced_at=JAN_15,
            last_sync_type=SyncType.PARTIAL,
            sync_in_progress=True,
        )
        await db_session.commit()

        entries = await SyncStatusReporter(db_session).get_status()

        assert [e.login for e in entries] == ["octocat", "hubot"]
        never, active = entries
        assert never.last_synced_at is None
        assert never.sync_type is None
        assert never.sync_in_progress is False
        assert active.sync_in_progress is True
        assert active.sync_type == SyncType.PARTIAL
        assert active.to_dict()["sync_type"] == "partial"
        assert active.to_dict()["last_synced_at"].startswith("2024-01-15T10:00:00")
