"""GitHub Org Mirror - mirror GitHub organization activity into a local store."""

from github_org_mirror.__version__ import __version__

__all__ = ["__version__"]
