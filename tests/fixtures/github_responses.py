"""Mock GitHub API response fixtures.

These fixtures represent realistic GitHub REST API responses for testing
schema parsing and conversion logic. Structure matches the GitHub REST API
(version 2022-11-28), trimmed of the many `*_url` template fields.

See: https://docs.github.com/en/rest
"""

from tests.conftest import (
    JAN_10_ISO,
    JAN_12_ISO,
    JAN_15_AFTERNOON_ISO,
    JAN_15_ISO,
    JAN_16_ISO,
)

# -----------------------------------------------------------------------------
# Account Responses
# -----------------------------------------------------------------------------
GITHUB_USER_RESPONSE = {
    "login": "octocat",
    "id": 583231,
    "node_id": "MDQ6VXNlcjU4MzIzMQ==",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "html_url": "https://github.com/octocat",
    "type": "User",
    "site_admin": False,
}

GITHUB_ORG_OWNER_RESPONSE = {
    "login": "acme",
    "id": 100,
    "node_id": "MDEyOk9yZ2FuaXphdGlvbjEwMA==",
    "avatar_url": "https://avatars.githubusercontent.com/u/100?v=4",
    "html_url": "https://github.com/acme",
    "type": "Organization",
}

# -----------------------------------------------------------------------------
# Repository Response
# -----------------------------------------------------------------------------
GITHUB_REPOSITORY_RESPONSE = {
    "id": 1296269,
    "node_id": "MDEwOlJlcG9zaXRvcnkxMjk2MjY5",
    "name": "api",
    "full_name": "acme/api",
    "private": True,
    "owner": GITHUB_ORG_OWNER_RESPONSE,
    "html_url": "https://github.com/acme/api",
    "description": "Public API gateway",
    "fork": False,
    "url": "https://api.github.com/repos/acme/api",
    "default_branch": "main",
    "language": "Go",
    "stargazers_count": 80,
    "watchers_count": 80,
    "forks_count": 9,
    "open_issues_count": 4,
    "created_at": JAN_10_ISO,
    "updated_at": JAN_15_ISO,
    "pushed_at": JAN_16_ISO,
}

# -----------------------------------------------------------------------------
# Pull Request Response
# -----------------------------------------------------------------------------
GITHUB_PR_RESPONSE = {
    "id": 1847293012,
    "node_id": "PR_kwDOAE1uRs5uG6xU",
    "number": 1347,
    "state": "closed",
    "locked": False,
    "title": "Amazing new feature",
    "user": GITHUB_USER_RESPONSE,
    "body": "Please pull these awesome changes in!",
    "labels": [
        {"id": 208045946, "name": "bug", "color": "f29513", "default": True},
    ],
    "milestone": None,
    "active_lock_reason": None,
    "created_at": JAN_10_ISO,
    "updated_at": JAN_12_ISO,
    "closed_at": JAN_12_ISO,
    "merged_at": JAN_12_ISO,
    "merge_commit_sha": "e5bd3914e2e596debea16f433f57875b5b90bcd6",
    "assignee": GITHUB_USER_RESPONSE,
    "assignees": [GITHUB_USER_RESPONSE, {**GITHUB_USER_RESPONSE, "login": "hubot", "id": 2}],
    "requested_reviewers": [],
    "html_url": "https://github.com/acme/api/pull/1347",
    "draft": False,
    "head": {"ref": "new-topic", "sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e"},
    "base": {"ref": "main", "sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e"},
    "author_association": "OWNER",
}

# -----------------------------------------------------------------------------
# Issue Response
# -----------------------------------------------------------------------------
GITHUB_ISSUE_RESPONSE = {
    "id": 1,
    "node_id": "MDU6SXNzdWUx",
    "number": 1348,
    "state": "closed",
    "state_reason": "completed",
    "title": "Found a bug",
    "body": "I'm having a problem with this.",
    "user": GITHUB_USER_RESPONSE,
    "labels": [
        {"id": 208045946, "name": "bug", "color": "f29513"},
        {"id": 208045947, "name": "p1", "color": "000000"},
    ],
    "assignee": GITHUB_USER_RESPONSE,
    "assignees": [GITHUB_USER_RESPONSE],
    "locked": False,
    "comments": 3,
    "html_url": "https://github.com/acme/api/issues/1348",
    "closed_at": JAN_16_ISO,
    "created_at": JAN_15_ISO,
    "updated_at": JAN_16_ISO,
    "closed_by": {**GITHUB_USER_RESPONSE, "login": "hubot", "id": 2},
    "author_association": "COLLABORATOR",
    "reactions": {
        "url": "https://api.github.com/repos/acme/api/issues/1348/reactions",
        "total_count": 5,
        "+1": 3,
        "-1": 1,
        "laugh": 0,
        "hooray": 1,
        "confused": 0,
        "heart": 0,
        "rocket": 0,
        "eyes": 0,
    },
}

# -----------------------------------------------------------------------------
# Issue Timeline Response
# -----------------------------------------------------------------------------
GITHUB_TIMELINE_RESPONSE = [
    {
        "id": 6430295168,
        "node_id": "LE_lADODwFebM5HwC0kzwAAAAF_RoSA",
        "event": "labeled",
        "actor": GITHUB_USER_RESPONSE,
        "created_at": JAN_15_ISO,
        "label": {"name": "bug", "color": "f29513"},
    },
    {
        "event": "committed",
        "sha": "f5d4ba2d3b7a1c6e8f9a0b1c2d3e4f5a6b7c8d9e",
        "node_id": "C_kwDOAE1uRtoAKGY1ZDRiYTJk",
        "author": {"name": "Octo Cat", "email": "octocat@github.com", "date": JAN_15_AFTERNOON_ISO},
        "committer": {
            "name": "GitHub",
            "email": "noreply@github.com",
            "date": JAN_15_AFTERNOON_ISO,
        },
        "message": "Fix the bug\n\nCloses #1348",
        "html_url": "https://github.com/acme/api/commit/f5d4ba2d3b7a1c6e8f9a0b1c2d3e4f5a6b7c8d9e",
    },
    {
        "id": 1570117580,
        "node_id": "PRR_kwDOAE1uRs5dlRnM",
        "event": "reviewed",
        "user": {**GITHUB_USER_RESPONSE, "login": "hubot", "id": 2},
        "body": "Looks good",
        "state": "approved",
        "html_url": "https://github.com/acme/api/pull/1347#pullrequestreview-1570117580",
        "submitted_at": JAN_16_ISO,
    },
    {
        "event": "cross-referenced",
        "actor": GITHUB_USER_RESPONSE,
        "created_at": JAN_16_ISO,
        "updated_at": JAN_16_ISO,
        "source": {
            "type": "issue",
            "issue": {
                "number": 77,
                "title": "Tracking issue",
                "html_url": "https://github.com/acme/web/issues/77",
                "repository": {"full_name": "acme/web"},
            },
        },
    },
    {
        "id": 6430299999,
        "event": "closed",
        "actor": GITHUB_USER_RESPONSE,
        "commit_id": "f5d4ba2d3b7a1c6e8f9a0b1c2d3e4f5a6b7c8d9e",
        "created_at": JAN_16_ISO,
        "state_reason": "completed",
    },
]
