"""Command line interface for GitHub Org Mirror."""
