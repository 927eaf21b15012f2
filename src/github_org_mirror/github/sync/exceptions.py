"""Exceptions raised by the sync orchestrator."""


class SyncError(Exception):
    """Base exception for sync run failures."""

    def __init__(self, message: str, user_id: int | None = None) -> None:
        super().__init__(message)
        self.user_id = user_id


class UserNotFoundError(SyncError):
    """Raised when the user to sync does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found", user_id)


class MissingCredentialError(SyncError):
    """Raised when the user has no GitHub access token stored."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} has no GitHub access token", user_id)


class SyncInProgressError(SyncError):
    """Raised by triggers when a run for the user is already active."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"A sync is already in progress for user {user_id}", user_id)
