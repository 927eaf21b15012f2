"""Request pacing for the GitHub API.

Components:
- RequestPacer: Fixed inter-page delays and the single 403 backoff/retry
"""

from .pacer import RequestPacer

__all__ = ["RequestPacer"]
