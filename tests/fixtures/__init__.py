"""Test fixtures for GitHub Org Mirror."""

from .fake_github import BASE_URL, SHA_A, SHA_B, FakeGitHub, seed_acme
from .github_responses import (
    GITHUB_ISSUE_RESPONSE,
    GITHUB_PR_RESPONSE,
    GITHUB_REPOSITORY_RESPONSE,
    GITHUB_TIMELINE_RESPONSE,
)

__all__ = [
    # Fake API
    "BASE_URL",
    "FakeGitHub",
    "SHA_A",
    "SHA_B",
    "seed_acme",
    # Mock GitHub API responses
    "GITHUB_ISSUE_RESPONSE",
    "GITHUB_PR_RESPONSE",
    "GITHUB_REPOSITORY_RESPONSE",
    "GITHUB_TIMELINE_RESPONSE",
]
