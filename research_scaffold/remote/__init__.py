"""Remote registration: GitHub API client, registrar and browser switch."""

from .browser import browser_suppressed, options
from .github import GitHubClient, GitHubRepository
from .registrar import RemoteRegistrar

__all__ = [
    "GitHubClient",
    "GitHubRepository",
    "RemoteRegistrar",
    "browser_suppressed",
    "options",
]
