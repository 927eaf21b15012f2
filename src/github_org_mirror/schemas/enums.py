"""Enums for Pydantic schemas."""

from enum import Enum


class SyncType(str, Enum):
    """Kind of sync run, decided from the user's last sync timestamp."""

    FULL = "full"
    """The user has never been synced; every page is fetched."""

    PARTIAL = "partial"
    """Incremental run filtering by "updated since" the last sync."""
