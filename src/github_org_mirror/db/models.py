"""SQLAlchemy ORM models for GitHub Org Mirror.

Every mirrored entity is scoped to the user whose credential fetched it and
carries GitHub's identifier as `external_id` (commits use their SHA). The
natural keys are enforced with unique constraints so that upserts stay
idempotent across runs.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)
from sqlalchemy.types import JSON

from github_org_mirror.schemas.enums import SyncType


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# External id of the synthetic organization grouping the curated repositories
OPEN_SOURCE_ORG_ID = 0
OPEN_SOURCE_ORG_LOGIN = "OpenSource"


# ------------------------------------------------------------------------------
# User model
# ------------------------------------------------------------------------------
class User(Base):
    """Account whose GitHub credential drives a sync run."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    login: Mapped[str] = mapped_column(String(100), unique=True)
    access_token: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Sync status (mutated only by the orchestrator)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_sync_type: Mapped[SyncType | None] = mapped_column(nullable=True)
    sync_in_progress: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    @property
    def has_token(self) -> bool:
        """Check whether a GitHub credential is stored."""
        return bool(self.access_token)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login='{self.login}')>"


# ------------------------------------------------------------------------------
# Organization model
# ------------------------------------------------------------------------------
class Organization(Base):
    """GitHub organization visible to a user (or the synthetic OpenSource org)."""

    __tablename__ = "organizations"
    __table_args__ = (
        UniqueConstraint("user_id", "external_id", name="uq_organization_user_external"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    external_id: Mapped[int] = mapped_column(BigInteger)

    login: Mapped[str] = mapped_column(String(100))
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Optional descriptive metadata
    blog: Mapped[str | None] = mapped_column(String(500), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    public_repos: Mapped[int | None] = mapped_column(nullable=True)
    followers: Mapped[int | None] = mapped_column(nullable=True)
    github_created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    github_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    repositories: Mapped[list["Repository"]] = relationship(
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    @property
    def is_open_source(self) -> bool:
        """Check if this is the synthetic organization for curated repositories."""
        return self.external_id == OPEN_SOURCE_ORG_ID

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, login='{self.login}')>"


# ------------------------------------------------------------------------------
# Repository model
# ------------------------------------------------------------------------------
class Repository(Base):
    """GitHub repository belonging to an organization."""

    __tablename__ = "repositories"
    __table_args__ = (
        UniqueConstraint("user_id", "external_id", name="uq_repository_user_external"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), index=True
    )
    external_id: Mapped[int] = mapped_column(BigInteger)

    name: Mapped[str] = mapped_column(String(100))
    full_name: Mapped[str] = mapped_column(String(200), index=True)  # "owner/name"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    owner: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_private: Mapped[bool] = mapped_column(default=False)
    default_branch: Mapped[str | None] = mapped_column(String(255), nullable=True)
    language: Mapped[str | None] = mapped_column(String(100), nullable=True)

    stargazers_count: Mapped[int | None] = mapped_column(nullable=True)
    forks_count: Mapped[int | None] = mapped_column(nullable=True)
    open_issues_count: Mapped[int | None] = mapped_column(nullable=True)

    github_created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    github_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    pushed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    organization: Mapped["Organization"] = relationship(back_populates="repositories")

    def __repr__(self) -> str:
        return f"<Repository(id={self.id}, full_name='{self.full_name}')>"


# ------------------------------------------------------------------------------
# Commit model
# ------------------------------------------------------------------------------
class Commit(Base):
    """Git commit, unique by SHA within a user's scope."""

    __tablename__ = "commits"
    __table_args__ = (UniqueConstraint("user_id", "sha", name="uq_commit_user_sha"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    repository_id: Mapped[int] = mapped_column(
        ForeignKey("repositories.id", ondelete="CASCADE"), index=True
    )
    sha: Mapped[str] = mapped_column(String(40))

    message: Mapped[str] = mapped_column(Text, default="")
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Git identities {name, email, date}
    author: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    committer: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    # Linked GitHub accounts {login, id, avatar_url, url}
    author_account: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    committer_account: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    verification: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    comment_count: Mapped[int | None] = mapped_column(nullable=True)
    authored_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Commit(id={self.id}, sha='{self.sha[:7]}')>"


# ------------------------------------------------------------------------------
# PullRequest model
# ------------------------------------------------------------------------------
class PullRequest(Base):
    """GitHub pull request with its commit SHAs embedded."""

    __tablename__ = "pull_requests"
    __table_args__ = (
        UniqueConstraint("user_id", "external_id", name="uq_pull_request_user_external"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    repository_id: Mapped[int] = mapped_column(
        ForeignKey("repositories.id", ondelete="CASCADE"), index=True
    )
    external_id: Mapped[int] = mapped_column(BigInteger)

    number: Mapped[int] = mapped_column()
    title: Mapped[str] = mapped_column(String(500))
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str] = mapped_column(String(20))
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    draft: Mapped[bool] = mapped_column(default=False)

    author: Mapped[str | None] = mapped_column(String(100), nullable=True)
    assignee: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    assignees: Mapped[list[str]] = mapped_column(JSON, default=list)
    labels: Mapped[list[str]] = mapped_column(JSON, default=list)
    commits: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list)  # [{sha}]

    github_created_at: Mapped[datetime] = mapped_column(DateTime)
    github_updated_at: Mapped[datetime] = mapped_column(DateTime)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    merged_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<PullRequest(id={self.id}, number={self.number}, title='{self.title[:30]}...')>"


# ------------------------------------------------------------------------------
# Issue model
# ------------------------------------------------------------------------------
class Issue(Base):
    """GitHub issue (pull requests from the issues listing are never stored here)."""

    __tablename__ = "issues"
    __table_args__ = (UniqueConstraint("user_id", "external_id", name="uq_issue_user_external"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    repository_id: Mapped[int] = mapped_column(
        ForeignKey("repositories.id", ondelete="CASCADE"), index=True
    )
    external_id: Mapped[int] = mapped_column(BigInteger)

    number: Mapped[int] = mapped_column()
    title: Mapped[str] = mapped_column(String(500))
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str] = mapped_column(String(20))
    state_reason: Mapped[str | None] = mapped_column(String(50), nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    author: Mapped[str | None] = mapped_column(String(100), nullable=True)
    assignee: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    labels: Mapped[list[str]] = mapped_column(JSON, default=list)
    closed_by: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    reactions: Mapped[dict[str, int] | None] = mapped_column(JSON, nullable=True)
    comments_count: Mapped[int] = mapped_column(default=0)

    github_created_at: Mapped[datetime] = mapped_column(DateTime)
    github_updated_at: Mapped[datetime] = mapped_column(DateTime)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    history: Mapped[list["IssueHistory"]] = relationship(
        back_populates="issue",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, number={self.number}, title='{self.title[:30]}...')>"


# ------------------------------------------------------------------------------
# IssueHistory model
# ------------------------------------------------------------------------------
class IssueHistory(Base):
    """One normalized issue timeline event."""

    __tablename__ = "issue_history"
    __table_args__ = (
        UniqueConstraint("user_id", "issue_id", "external_id", name="uq_issue_history_event"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    issue_id: Mapped[int] = mapped_column(ForeignKey("issues.id", ondelete="CASCADE"), index=True)
    repository_id: Mapped[int] = mapped_column(
        ForeignKey("repositories.id", ondelete="CASCADE"), index=True
    )
    # Provider id as text, or a generated surrogate for events without one
    external_id: Mapped[str] = mapped_column(String(64))

    event: Mapped[str] = mapped_column(String(64))
    actor: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    occurred_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    summary: Mapped[str] = mapped_column(Text)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    commit_id: Mapped[str | None] = mapped_column(String(40), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    issue: Mapped["Issue"] = relationship(back_populates="history")

    def __repr__(self) -> str:
        return f"<IssueHistory(id={self.id}, event='{self.event}')>"


# ------------------------------------------------------------------------------
# OrganizationUser model
# ------------------------------------------------------------------------------
class OrganizationUser(Base):
    """Member of an organization (or contributor of a curated repository)."""

    __tablename__ = "organization_users"
    __table_args__ = (
        UniqueConstraint(
            "external_id", "organization_id", "user_id", name="uq_organization_user_member"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), index=True
    )
    external_id: Mapped[int] = mapped_column(BigInteger)

    login: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Enrichment from the user-detail lookup
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    public_repos: Mapped[int | None] = mapped_column(nullable=True)
    followers: Mapped[int | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<OrganizationUser(id={self.id}, login='{self.login}')>"


# ------------------------------------------------------------------------------
# Entity registry
# ------------------------------------------------------------------------------
class EntityKind(str, Enum):
    """Closed set of mirrored entity kinds."""

    ORGANIZATION = "organization"
    REPOSITORY = "repository"
    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    ISSUE = "issue"
    ISSUE_HISTORY = "issue_history"
    ORGANIZATION_USER = "organization_user"


ENTITY_MODELS: dict[EntityKind, type[Base]] = {
    EntityKind.ORGANIZATION: Organization,
    EntityKind.REPOSITORY: Repository,
    EntityKind.COMMIT: Commit,
    EntityKind.PULL_REQUEST: PullRequest,
    EntityKind.ISSUE: Issue,
    EntityKind.ISSUE_HISTORY: IssueHistory,
    EntityKind.ORGANIZATION_USER: OrganizationUser,
}
