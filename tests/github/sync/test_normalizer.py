"""Tests for issue timeline event normalization."""

import uuid

import pytest

from github_org_mirror.github.sync.normalizer import (
    GHOST_LOGIN,
    HANDLED_KINDS,
    history_external_id,
    history_fingerprint,
    normalize_event,
    to_history_row,
)
from github_org_mirror.schemas.github_api import GitHubTimelineEvent
from tests.conftest import JAN_15
from tests.factories import (
    make_committed_event,
    make_cross_referenced_event,
    make_timeline_event,
)
from tests.fixtures.github_responses import GITHUB_TIMELINE_RESPONSE


def parse(record: dict) -> GitHubTimelineEvent:
    return GitHubTimelineEvent.model_validate(record)


class TestNormalizeEvent:
    """Summaries and details for each event kind."""

    def test_labeled(self):
        event = parse(make_timeline_event("labeled", id=1, label={"name": "bug", "color": "f00"}))

        normalized = normalize_event(event)

        assert normalized.summary == "octocat added the 'bug' label"
        assert normalized.details == {"label": "bug", "color": "f00"}

    def test_unlabeled(self):
        event = parse(make_timeline_event("unlabeled", id=1, label={"name": "bug"}))

        assert normalize_event(event).summary == "octocat removed the 'bug' label"

    def test_committed_uses_git_author_and_headline(self):
        """Only the first line of the message is summarized."""
        event = parse(make_committed_event(sha="0123456789abcdef", message="Fix bug\n\nBody"))

        normalized = normalize_event(event)

        assert normalized.summary == "Octo Cat committed 0123456: Fix bug"
        assert normalized.details["sha"] == "0123456789abcdef"
        assert normalized.details["message"] == "Fix bug\n\nBody"

    def test_committed_without_message(self):
        event = parse({"event": "committed", "sha": "0123456789abcdef"})

        assert normalize_event(event).summary == f"{GHOST_LOGIN} committed 0123456"

    def test_renamed(self):
        event = parse(
            make_timeline_event("renamed", id=1, rename={"from": "Old title", "to": "New title"})
        )

        normalized = normalize_event(event)

        assert normalized.summary == "octocat changed the title from 'Old title' to 'New title'"
        assert normalized.details == {"from": "Old title", "to": "New title"}

    def test_assigned(self):
        event = parse(make_timeline_event("assigned", id=1, assignee={"login": "hubot"}))

        normalized = normalize_event(event)

        assert normalized.summary == "octocat assigned hubot"
        assert normalized.details == {"assignee": "hubot"}

    def test_cross_referenced(self):
        event = parse(make_cross_referenced_event(source_number=9, source_repo="acme/web"))

        normalized = normalize_event(event)

        assert normalized.summary == "octocat referenced this from acme/web#9"
        assert normalized.details["source_url"] == "https://github.com/acme/web/issues/9"
        assert normalized.details["source_is_pull_request"] is False

    def test_reviewed(self):
        """Reviews are attributed to `user` and describe the review state."""
        normalized = normalize_event(parse(GITHUB_TIMELINE_RESPONSE[2]))

        assert normalized.summary == "hubot approved this pull request"
        assert normalized.details["state"] == "approved"

    def test_closed_with_reason_and_commit(self):
        normalized = normalize_event(parse(GITHUB_TIMELINE_RESPONSE[4]))

        assert normalized.summary == "octocat closed this as completed in f5d4ba2"

    def test_closed_as_not_planned(self):
        event = parse(make_timeline_event("closed", id=1, state_reason="not_planned"))

        assert normalize_event(event).summary == "octocat closed this as not planned"

    def test_milestoned(self):
        event = parse(make_timeline_event("milestoned", id=1, milestone={"title": "v2.0"}))

        assert normalize_event(event).summary == "octocat added this to the 'v2.0' milestone"

    def test_review_requested(self):
        event = parse(
            make_timeline_event("review_requested", id=1, requested_reviewer={"login": "hubot"})
        )

        assert normalize_event(event).summary == "octocat requested a review from hubot"

    def test_locked_with_reason(self):
        event = parse(make_timeline_event("locked", id=1, lock_reason="spam"))

        assert normalize_event(event).summary == "octocat locked the conversation as spam"

    def test_deleted_actor_is_ghost(self):
        """Events whose actor account was deleted are attributed to ghost."""
        event = parse(make_timeline_event("reopened", id=1, actor=None))

        assert normalize_event(event).summary == "ghost reopened this"

    @pytest.mark.parametrize("kind", sorted(HANDLED_KINDS))
    def test_every_handled_kind_produces_summary(self, kind):
        """Handled kinds never fall back to the bare tag, even with sparse payloads."""
        normalized = normalize_event(parse(make_timeline_event(kind, id=1)))

        assert normalized.summary
        assert normalized.summary != kind
        assert isinstance(normalized.details, dict)

    def test_unknown_kind_is_not_an_error(self):
        """Unhandled kinds normalize to their tag with empty details."""
        event = parse(make_timeline_event("added_to_project_v2", id=1))

        normalized = normalize_event(event)

        assert normalized.summary == "added_to_project_v2"
        assert normalized.details == {}


class TestHistoryExternalId:
    """Natural ids of history rows."""

    def test_provider_id_used_as_text(self):
        event = parse(make_timeline_event("labeled", id=6430295168))

        assert history_external_id(event, issue_external_id=1, occurrence=0) == "6430295168"

    def test_surrogate_is_deterministic(self):
        """The same event and occurrence map to the same id on every run."""
        first = history_external_id(parse(make_committed_event()), 400, 3)
        second = history_external_id(parse(make_committed_event()), 400, 3)

        assert first == second
        assert uuid.UUID(first).version == 5

    def test_surrogate_depends_on_occurrence(self):
        """Repeats of an identical event stay distinct."""
        event = parse(make_committed_event())

        assert history_external_id(event, 400, 0) != history_external_id(event, 400, 1)

    def test_surrogate_depends_on_issue(self):
        event = parse(make_cross_referenced_event())

        assert history_external_id(event, 400, 0) != history_external_id(event, 401, 0)

    def test_surrogate_depends_on_content(self):
        first = parse(make_cross_referenced_event(source_number=1))
        second = parse(make_cross_referenced_event(source_number=2))

        assert history_external_id(first, 400, 0) != history_external_id(second, 400, 0)


class TestHistoryFingerprint:
    def test_none_for_provider_id(self):
        assert history_fingerprint(parse(make_timeline_event("labeled", id=9001))) is None

    def test_identical_events_share_fingerprint(self):
        first = history_fingerprint(parse(make_committed_event()))

        assert first is not None
        assert first == history_fingerprint(parse(make_committed_event()))

    def test_cross_references_differ_by_source(self):
        first = parse(make_cross_referenced_event(source_number=1))
        second = parse(make_cross_referenced_event(source_number=2))

        assert history_fingerprint(first) != history_fingerprint(second)


class TestToHistoryRow:
    """Column values for IssueHistory."""

    def test_row_for_labeled_event(self):
        row = to_history_row(
            parse(GITHUB_TIMELINE_RESPONSE[0]), issue_external_id=1, occurrence=0
        )

        assert row["external_id"] == "6430295168"
        assert row["event"] == "labeled"
        assert row["actor"]["login"] == "octocat"
        assert row["occurred_at"] == JAN_15
        assert row["summary"] == "octocat added the 'bug' label"
        assert row["commit_id"] is None

    def test_row_for_committed_event(self):
        """Committed rows have no actor account and keep the SHA as commit_id."""
        row = to_history_row(
            parse(GITHUB_TIMELINE_RESPONSE[1]), issue_external_id=1, occurrence=1
        )

        assert row["actor"] is None
        assert row["commit_id"] == "f5d4ba2d3b7a1c6e8f9a0b1c2d3e4f5a6b7c8d9e"
        assert row["event"] == "committed"
