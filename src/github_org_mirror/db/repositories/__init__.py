"""Repository pattern implementation for database access.

This module provides repository classes that encapsulate all database
access logic, providing a clean abstraction over SQLAlchemy models.
"""

from .base import BaseRepository, UpsertOperation
from .commit import CommitRepository
from .issue import IssueRepository
from .issue_history import IssueHistoryRepository
from .organization import OrganizationRepository
from .organization_user import OrganizationUserRepository
from .pull_request import PullRequestRepository
from .repository import RepositoryRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "CommitRepository",
    "IssueHistoryRepository",
    "IssueRepository",
    "OrganizationRepository",
    "OrganizationUserRepository",
    "PullRequestRepository",
    "RepositoryRepository",
    "UpsertOperation",
    "UserRepository",
]
