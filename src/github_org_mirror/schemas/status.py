"""Read schemas for users and their sync status."""

from datetime import datetime

from pydantic import Field

from .base import SchemaBase
from .enums import SyncType


class UserRead(SchemaBase):
    """A registered user, without credentials."""

    id: int
    login: str
    last_synced_at: datetime | None = None
    last_sync_type: SyncType | None = None
    sync_in_progress: bool = False
    has_token: bool = Field(default=False, description="Whether an access token is stored")


class SyncStatusEntry(SchemaBase):
    """Per-user sync status as reported to operators."""

    user_id: int
    login: str
    sync_in_progress: bool
    last_synced_at: datetime | None = None
    sync_type: SyncType | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_id": self.user_id,
            "login": self.login,
            "sync_in_progress": self.sync_in_progress,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
            "sync_type": self.sync_type.value if self.sync_type else None,
        }
