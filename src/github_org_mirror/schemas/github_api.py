"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest

Nested sub-objects (user, assignee, closed_by, actor, git author) have
every field optional: GitHub omits or nulls them freely depending on the
endpoint, the event kind and whether the account still exists.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ------------------------------------------------------------------------------
# Nested objects
# ------------------------------------------------------------------------------


class GitHubAccount(BaseModel):
    """GitHub user or organization account reference."""

    login: str | None = Field(default=None, description="GitHub username")
    id: int | None = Field(default=None, description="GitHub account ID")
    node_id: str | None = Field(default=None, description="GraphQL node ID")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    html_url: str | None = Field(default=None, description="Profile URL")
    type: str | None = Field(default=None, description="Account type (User, Organization, Bot)")

    def to_ref(self) -> dict[str, Any]:
        """Compact representation stored in JSON columns."""
        return {
            "login": self.login,
            "id": self.id,
            "avatar_url": self.avatar_url,
            "url": self.html_url,
        }


class GitHubLabel(BaseModel):
    """GitHub label object from API responses."""

    id: int | None = Field(default=None, description="Label ID")
    name: str | None = Field(default=None, description="Label name")
    color: str | None = Field(default=None, description="Label color (hex without #)")


class GitHubGitActor(BaseModel):
    """Git author/committer info (from git, not GitHub user)."""

    name: str | None = Field(default=None, description="Author name")
    email: str | None = Field(default=None, description="Author email")
    date: datetime | None = Field(default=None, description="Commit date (UTC)")

    def to_ref(self) -> dict[str, Any]:
        """JSON-serializable form for storage."""
        return {
            "name": self.name,
            "email": self.email,
            "date": self.date.isoformat() if self.date else None,
        }


class GitHubVerification(BaseModel):
    """Commit signature verification metadata."""

    verified: bool | None = Field(default=None, description="Whether the signature verified")
    reason: str | None = Field(default=None, description="Verification reason code")


class GitHubReactions(BaseModel):
    """Reaction rollup attached to issues."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = 0
    plus_one: int = Field(default=0, alias="+1")
    minus_one: int = Field(default=0, alias="-1")
    laugh: int = 0
    hooray: int = 0
    confused: int = 0
    heart: int = 0
    rocket: int = 0
    eyes: int = 0

    def to_counts(self) -> dict[str, int]:
        """Counts keyed the way GitHub names them."""
        return self.model_dump(by_alias=True)


# ------------------------------------------------------------------------------
# Organizations & members
# ------------------------------------------------------------------------------


class GitHubOrganization(BaseModel):
    """GitHub organization object.

    Maps to: GET /orgs/{org} (and the summary from GET /user/orgs)
    """

    id: int = Field(description="Organization ID")
    login: str = Field(description="Organization login")
    name: str | None = Field(default=None, description="Display name")
    description: str | None = Field(default=None, description="Organization description")
    html_url: str | None = Field(default=None, description="Organization profile URL")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    blog: str | None = None
    location: str | None = None
    email: str | None = None
    public_repos: int | None = None
    followers: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        """Column values for the Organization model."""
        return {
            "login": self.login,
            "name": self.name or self.login,
            "description": self.description,
            # The summary endpoint has no html_url
            "url": self.html_url or f"https://github.com/{self.login}",
            "avatar_url": self.avatar_url,
            "blog": self.blog,
            "location": self.location,
            "email": self.email,
            "public_repos": self.public_repos,
            "followers": self.followers,
            "github_created_at": self.created_at,
            "github_updated_at": self.updated_at,
        }


class GitHubUserDetail(GitHubAccount):
    """Detailed user profile.

    Maps to: GET /users/{username}
    """

    name: str | None = None
    company: str | None = None
    location: str | None = None
    email: str | None = None
    bio: str | None = None
    public_repos: int | None = None
    followers: int | None = None

    def to_member_fields(self) -> dict[str, Any]:
        """Column values for the OrganizationUser model."""
        return {
            "login": self.login,
            "avatar_url": self.avatar_url,
            "url": self.html_url,
            "name": self.name,
            "company": self.company,
            "location": self.location,
            "email": self.email,
            "bio": self.bio,
            "public_repos": self.public_repos,
            "followers": self.followers,
        }


# ------------------------------------------------------------------------------
# Repositories & commits
# ------------------------------------------------------------------------------


class GitHubRepository(BaseModel):
    """GitHub repository object.

    Maps to: GET /repos/{owner}/{repo} and GET /orgs/{org}/repos
    """

    id: int = Field(description="Repository ID")
    name: str = Field(description="Repository name")
    full_name: str = Field(description="owner/name")
    description: str | None = None
    html_url: str | None = None
    private: bool = False
    owner: GitHubAccount | None = None
    default_branch: str | None = None
    language: str | None = None
    stargazers_count: int | None = None
    forks_count: int | None = None
    open_issues_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        """Column values for the Repository model."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "description": self.description,
            "url": self.html_url,
            "owner": self.owner.to_ref() if self.owner else None,
            "is_private": self.private,
            "default_branch": self.default_branch,
            "language": self.language,
            "stargazers_count": self.stargazers_count,
            "forks_count": self.forks_count,
            "open_issues_count": self.open_issues_count,
            "github_created_at": self.created_at,
            "github_updated_at": self.updated_at,
            "pushed_at": self.pushed_at,
        }


class GitHubCommitDetail(BaseModel):
    """Nested git commit object."""

    message: str = Field(default="", description="Commit message")
    author: GitHubGitActor | None = None
    committer: GitHubGitActor | None = None
    verification: GitHubVerification | None = None
    comment_count: int | None = None


class GitHubCommit(BaseModel):
    """GitHub commit object from commits endpoints.

    Maps to: GET /repos/{owner}/{repo}/commits and
    GET /repos/{owner}/{repo}/pulls/{number}/commits
    """

    sha: str = Field(description="Commit SHA")
    html_url: str | None = None
    commit: GitHubCommitDetail = Field(default_factory=GitHubCommitDetail)
    author: GitHubAccount | None = Field(default=None, description="Linked GitHub author")
    committer: GitHubAccount | None = Field(default=None, description="Linked GitHub committer")

    def to_fields(self) -> dict[str, Any]:
        """Column values for the Commit model."""
        detail = self.commit
        return {
            "message": detail.message,
            "url": self.html_url,
            "author": detail.author.to_ref() if detail.author else None,
            "committer": detail.committer.to_ref() if detail.committer else None,
            "author_account": self.author.to_ref() if self.author else None,
            "committer_account": self.committer.to_ref() if self.committer else None,
            "verification": (
                detail.verification.model_dump() if detail.verification else None
            ),
            "comment_count": detail.comment_count,
            "authored_at": detail.author.date if detail.author else None,
        }


# ------------------------------------------------------------------------------
# Pull requests & issues
# ------------------------------------------------------------------------------


class GitHubPullRequest(BaseModel):
    """GitHub Pull Request object from the list endpoint.

    Maps to: GET /repos/{owner}/{repo}/pulls
    """

    id: int = Field(description="PR ID")
    number: int = Field(description="PR number")
    title: str = Field(default="", description="PR title")
    body: str | None = Field(default=None, description="PR description")
    state: str = Field(description="PR state (open, closed)")
    html_url: str | None = None
    draft: bool = False

    user: GitHubAccount | None = Field(default=None, description="PR author")
    assignee: GitHubAccount | None = None
    assignees: list[GitHubAccount] = Field(default_factory=list)
    labels: list[GitHubLabel] = Field(default_factory=list)

    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    closed_at: datetime | None = None
    merged_at: datetime | None = None

    def to_fields(self, commit_shas: list[str] | None = None) -> dict[str, Any]:
        """Column values for the PullRequest model.

        Args:
            commit_shas: SHAs of the PR's commits. None leaves the stored
                         list untouched on update.
        """
        fields: dict[str, Any] = {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "state": self.state,
            "url": self.html_url,
            "draft": self.draft,
            "author": self.user.login if self.user else None,
            "assignee": self.assignee.to_ref() if self.assignee else None,
            "assignees": [a.login for a in self.assignees if a.login],
            "labels": [label.name for label in self.labels if label.name],
            "github_created_at": self.created_at,
            "github_updated_at": self.updated_at,
            "closed_at": self.closed_at,
            "merged_at": self.merged_at,
        }
        if commit_shas is not None:
            fields["commits"] = [{"sha": sha} for sha in commit_shas]
        return fields


class GitHubIssue(BaseModel):
    """GitHub Issue object from the issues listing.

    Maps to: GET /repos/{owner}/{repo}/issues

    The listing also returns pull requests; those carry a `pull_request`
    marker object.
    """

    id: int = Field(description="Issue ID")
    number: int = Field(description="Issue number")
    title: str = Field(default="", description="Issue title")
    body: str | None = None
    state: str = Field(description="Issue state (open, closed)")
    state_reason: str | None = None
    html_url: str | None = None

    user: GitHubAccount | None = None
    assignee: GitHubAccount | None = None
    assignees: list[GitHubAccount] = Field(default_factory=list)
    labels: list[GitHubLabel] = Field(default_factory=list)
    closed_by: GitHubAccount | None = None
    reactions: GitHubReactions | None = None
    comments: int = 0

    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None

    pull_request: dict[str, Any] | None = Field(
        default=None, description="Present only when the record is a pull request"
    )

    @property
    def is_pull_request(self) -> bool:
        """Check if this listing record is actually a pull request."""
        return self.pull_request is not None

    def to_fields(self) -> dict[str, Any]:
        """Column values for the Issue model."""
        return {
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "state": self.state,
            "state_reason": self.state_reason,
            "url": self.html_url,
            "author": self.user.login if self.user else None,
            "assignee": self.assignee.to_ref() if self.assignee else None,
            "labels": [label.name for label in self.labels if label.name],
            "closed_by": self.closed_by.to_ref() if self.closed_by else None,
            "reactions": self.reactions.to_counts() if self.reactions else None,
            "comments_count": self.comments,
            "github_created_at": self.created_at,
            "github_updated_at": self.updated_at,
            "closed_at": self.closed_at,
        }


# ------------------------------------------------------------------------------
# Issue timeline
# ------------------------------------------------------------------------------


class TimelineRename(BaseModel):
    """Title change carried by `renamed` events."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class TimelineMilestone(BaseModel):
    """Milestone reference on `milestoned`/`demilestoned` events."""

    title: str | None = None


class TimelineSourceIssue(BaseModel):
    """The referencing issue or PR of a `cross-referenced` event."""

    number: int | None = None
    title: str | None = None
    html_url: str | None = None
    repository: dict[str, Any] | None = None
    pull_request: dict[str, Any] | None = None


class TimelineSource(BaseModel):
    """Source of a `cross-referenced` event."""

    type: str | None = None
    issue: TimelineSourceIssue | None = None


class GitHubTimelineEvent(BaseModel):
    """One record from the issue timeline feed.

    Maps to: GET /repos/{owner}/{repo}/issues/{number}/timeline

    The timeline is heterogeneous: which fields are present depends on the
    event kind. `committed` and `cross-referenced` events have no `id`;
    `reviewed` events use `user`/`submitted_at` instead of
    `actor`/`created_at`; `committed` events carry git author data.
    """

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    node_id: str | None = None
    event: str | None = None
    actor: GitHubAccount | None = None
    user: GitHubAccount | None = None
    created_at: datetime | None = None
    submitted_at: datetime | None = None
    updated_at: datetime | None = None

    # Kind-specific payloads
    commit_id: str | None = None
    sha: str | None = None
    message: str | None = None
    author: GitHubGitActor | None = None
    committer: GitHubGitActor | None = None
    label: GitHubLabel | None = None
    assignee: GitHubAccount | None = None
    requested_reviewer: GitHubAccount | None = None
    rename: TimelineRename | None = None
    milestone: TimelineMilestone | None = None
    source: TimelineSource | None = None
    state: str | None = None
    state_reason: str | None = None
    body: str | None = None
    lock_reason: str | None = None
    html_url: str | None = None

    @property
    def kind(self) -> str:
        """Event kind tag (falls back to "unknown" when GitHub omits it)."""
        return self.event or "unknown"

    @property
    def effective_actor(self) -> GitHubAccount | None:
        """Who triggered the event, whichever key the kind uses."""
        return self.actor or self.user

    @property
    def occurred_at(self) -> datetime | None:
        """When the event happened, whichever key the kind uses."""
        if self.created_at is not None:
            return self.created_at
        if self.submitted_at is not None:
            return self.submitted_at
        if self.committer is not None and self.committer.date is not None:
            return self.committer.date
        if self.author is not None:
            return self.author.date
        return None
