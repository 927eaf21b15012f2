"""Issue timeline event normalization.

The timeline feed mixes dozens of event kinds, each with its own payload
keys. Every event is reduced to a human-readable `summary` plus a small
`details` mapping so that history rows share one shape regardless of kind.

Kinds without a handler are not errors: they normalize to their kind tag
with empty details.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from github_org_mirror.schemas.github_api import GitHubTimelineEvent

# Placeholder GitHub shows for deleted accounts
GHOST_LOGIN = "ghost"

# Namespace for surrogate ids of events the provider sends without an id
TIMELINE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://api.github.com/timeline")


@dataclass(frozen=True)
class NormalizedEvent:
    """Uniform representation of one timeline event."""

    summary: str
    details: dict[str, Any] = field(default_factory=dict)


Handler = Callable[[GitHubTimelineEvent, str], NormalizedEvent]


def _short_sha(sha: str | None) -> str:
    return sha[:7] if sha else "unknown"


def _login(account: Any) -> str | None:
    return account.login if account is not None else None


# ------------------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------------------


def _committed(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    author = event.author.name if event.author and event.author.name else actor
    message = event.message or ""
    summary = f"{author} committed {_short_sha(event.sha)}"
    if message:
        summary += f": {message.splitlines()[0]}"
    return NormalizedEvent(
        summary=summary,
        details={
            "sha": event.sha,
            "message": message,
            "author": event.author.to_ref() if event.author else None,
        },
    )


def _labeled(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    name = event.label.name if event.label else None
    return NormalizedEvent(
        summary=f"{actor} added the '{name}' label",
        details={"label": name, "color": event.label.color if event.label else None},
    )


def _unlabeled(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    name = event.label.name if event.label else None
    return NormalizedEvent(
        summary=f"{actor} removed the '{name}' label",
        details={"label": name},
    )


def _assigned(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    assignee = _login(event.assignee)
    return NormalizedEvent(summary=f"{actor} assigned {assignee}", details={"assignee": assignee})


def _unassigned(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    assignee = _login(event.assignee)
    return NormalizedEvent(
        summary=f"{actor} unassigned {assignee}", details={"assignee": assignee}
    )


def _renamed(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    old = event.rename.from_ if event.rename else None
    new = event.rename.to if event.rename else None
    return NormalizedEvent(
        summary=f"{actor} changed the title from '{old}' to '{new}'",
        details={"from": old, "to": new},
    )


def _cross_referenced(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    issue = event.source.issue if event.source else None
    if issue is None:
        return NormalizedEvent(summary=f"{actor} referenced this", details={})
    repository = (issue.repository or {}).get("full_name")
    where = f"{repository}#{issue.number}" if repository else f"#{issue.number}"
    return NormalizedEvent(
        summary=f"{actor} referenced this from {where}",
        details={
            "source_number": issue.number,
            "source_title": issue.title,
            "source_url": issue.html_url,
            "source_repository": repository,
            "source_is_pull_request": issue.pull_request is not None,
        },
    )


def _referenced(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    return NormalizedEvent(
        summary=f"{actor} referenced this in commit {_short_sha(event.commit_id)}",
        details={"commit_id": event.commit_id},
    )


def _reviewed(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    state = (event.state or "reviewed").lower()
    return NormalizedEvent(
        summary=f"{actor} {state.replace('_', ' ')} this pull request",
        details={"state": event.state, "body": event.body, "url": event.html_url},
    )


def _commented(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    return NormalizedEvent(
        summary=f"{actor} commented",
        details={"body": event.body, "url": event.html_url},
    )


def _closed(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    summary = f"{actor} closed this"
    if event.state_reason:
        summary += f" as {event.state_reason.replace('_', ' ')}"
    if event.commit_id:
        summary += f" in {_short_sha(event.commit_id)}"
    return NormalizedEvent(
        summary=summary,
        details={"state_reason": event.state_reason, "commit_id": event.commit_id},
    )


def _reopened(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    return NormalizedEvent(summary=f"{actor} reopened this", details={})


def _milestoned(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    title = event.milestone.title if event.milestone else None
    return NormalizedEvent(
        summary=f"{actor} added this to the '{title}' milestone",
        details={"milestone": title},
    )


def _demilestoned(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    title = event.milestone.title if event.milestone else None
    return NormalizedEvent(
        summary=f"{actor} removed this from the '{title}' milestone",
        details={"milestone": title},
    )


def _locked(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    summary = f"{actor} locked the conversation"
    if event.lock_reason:
        summary += f" as {event.lock_reason}"
    return NormalizedEvent(summary=summary, details={"lock_reason": event.lock_reason})


def _unlocked(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    return NormalizedEvent(summary=f"{actor} unlocked the conversation", details={})


def _review_requested(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    reviewer = _login(event.requested_reviewer)
    return NormalizedEvent(
        summary=f"{actor} requested a review from {reviewer}",
        details={"requested_reviewer": reviewer},
    )


def _review_request_removed(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    reviewer = _login(event.requested_reviewer)
    return NormalizedEvent(
        summary=f"{actor} removed the review request for {reviewer}",
        details={"requested_reviewer": reviewer},
    )


def _merged(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
    return NormalizedEvent(
        summary=f"{actor} merged commit {_short_sha(event.commit_id)}",
        details={"commit_id": event.commit_id},
    )


def _simple(template: str) -> Handler:
    """Handler for kinds whose payload carries nothing beyond the actor."""

    def handler(event: GitHubTimelineEvent, actor: str) -> NormalizedEvent:
        return NormalizedEvent(summary=template.format(actor=actor), details={})

    return handler


_HANDLERS: dict[str, Handler] = {
    "committed": _committed,
    "labeled": _labeled,
    "unlabeled": _unlabeled,
    "assigned": _assigned,
    "unassigned": _unassigned,
    "renamed": _renamed,
    "cross-referenced": _cross_referenced,
    "referenced": _referenced,
    "reviewed": _reviewed,
    "commented": _commented,
    "closed": _closed,
    "reopened": _reopened,
    "milestoned": _milestoned,
    "demilestoned": _demilestoned,
    "locked": _locked,
    "unlocked": _unlocked,
    "mentioned": _simple("{actor} was mentioned"),
    "subscribed": _simple("{actor} subscribed"),
    "unsubscribed": _simple("{actor} unsubscribed"),
    "review_requested": _review_requested,
    "review_request_removed": _review_request_removed,
    "merged": _merged,
    "head_ref_deleted": _simple("{actor} deleted the head branch"),
    "head_ref_force_pushed": _simple("{actor} force-pushed the head branch"),
    "connected": _simple("{actor} linked a pull request"),
    "disconnected": _simple("{actor} unlinked a pull request"),
    "pinned": _simple("{actor} pinned this issue"),
    "unpinned": _simple("{actor} unpinned this issue"),
    "transferred": _simple("{actor} transferred this issue"),
    "marked_as_duplicate": _simple("{actor} marked this as a duplicate"),
    "unmarked_as_duplicate": _simple("{actor} unmarked this as a duplicate"),
    "converted_to_discussion": _simple("{actor} converted this issue to a discussion"),
}

HANDLED_KINDS = frozenset(_HANDLERS)


# ------------------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------------------


def normalize_event(event: GitHubTimelineEvent) -> NormalizedEvent:
    """Map a timeline event to its summary and details.

    Args:
        event: Parsed timeline record

    Returns:
        NormalizedEvent; unknown kinds yield summary == kind and empty details
    """
    handler = _HANDLERS.get(event.kind)
    if handler is None:
        return NormalizedEvent(summary=event.kind, details={})
    actor = _login(event.effective_actor) or GHOST_LOGIN
    return handler(event, actor)


def history_fingerprint(event: GitHubTimelineEvent) -> str | None:
    """Stable content key of an event without a provider id.

    Returns None when the event carries its own id. Identical fingerprints
    within one timeline are told apart by their occurrence count (see
    `history_external_id`), never by their position, so deleting an
    unrelated event upstream does not shift the ids of later ones.
    """
    if event.id is not None:
        return None

    occurred_at = event.occurred_at
    source_url = None
    if event.source is not None and event.source.issue is not None:
        source_url = event.source.issue.html_url
    parts = [
        event.kind,
        event.sha or event.commit_id or "",
        occurred_at.isoformat() if occurred_at else "",
        _login(event.effective_actor) or "",
        source_url or "",
    ]
    return "|".join(parts)


def history_external_id(
    event: GitHubTimelineEvent,
    issue_external_id: int,
    occurrence: int = 0,
) -> str:
    """Natural id of a history row.

    The provider id is used when present. `committed` and `cross-referenced`
    events have none, so a deterministic UUID is derived from the issue,
    the event's fingerprint and how many identical events precede it in
    the timeline; re-running the sync therefore hits the same row.

    Args:
        event: Parsed timeline record
        issue_external_id: GitHub id of the issue the timeline belongs to
        occurrence: 0-based count of earlier events with the same fingerprint
    """
    fingerprint = history_fingerprint(event)
    if fingerprint is None:
        return str(event.id)
    name = f"{issue_external_id}|{occurrence}|{fingerprint}"
    return str(uuid.uuid5(TIMELINE_NAMESPACE, name))


def to_history_row(
    event: GitHubTimelineEvent,
    issue_external_id: int,
    occurrence: int = 0,
) -> dict[str, Any]:
    """Build the IssueHistory column values for one timeline event."""
    normalized = normalize_event(event)
    actor = event.effective_actor
    return {
        "external_id": history_external_id(event, issue_external_id, occurrence),
        "event": event.kind,
        "actor": actor.to_ref() if actor is not None else None,
        "occurred_at": event.occurred_at,
        "summary": normalized.summary,
        "details": normalized.details,
        "commit_id": event.commit_id or event.sha,
    }
