"""Database module for GitHub Org Mirror."""

from github_org_mirror.db.engine import (
    create_tables,
    dispose_engine,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
)
from github_org_mirror.db.models import (
    ENTITY_MODELS,
    OPEN_SOURCE_ORG_ID,
    Base,
    Commit,
    EntityKind,
    Issue,
    IssueHistory,
    Organization,
    OrganizationUser,
    PullRequest,
    Repository,
    User,
)
from github_org_mirror.db.repositories import (
    BaseRepository,
    CommitRepository,
    IssueHistoryRepository,
    IssueRepository,
    OrganizationRepository,
    OrganizationUserRepository,
    PullRequestRepository,
    RepositoryRepository,
    UserRepository,
)

__all__ = [
    # Models
    "ENTITY_MODELS",
    "OPEN_SOURCE_ORG_ID",
    "Base",
    "Commit",
    "EntityKind",
    "Issue",
    "IssueHistory",
    "Organization",
    "OrganizationUser",
    "PullRequest",
    "Repository",
    "User",
    # Engine
    "create_tables",
    "dispose_engine",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "CommitRepository",
    "IssueHistoryRepository",
    "IssueRepository",
    "OrganizationRepository",
    "OrganizationUserRepository",
    "PullRequestRepository",
    "RepositoryRepository",
    "UserRepository",
]
