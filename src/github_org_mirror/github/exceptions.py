"""GitHub client exceptions."""


class GitHubClientError(Exception):
    """Base exception for GitHub client errors.

    Carries the HTTP status and response body when the failure came from
    an HTTP response (both are None for transport-level failures).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401)."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Base class for errors the sync pipeline retries after a pause."""

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised on 403, GitHub's primary and secondary rate limit signal."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass
