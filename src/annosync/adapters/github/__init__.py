"""
GitHub Adapter - Implementation of IssueTrackerPort for GitHub issues.
"""

from .adapter import GitHubAdapter
from .client import GitHubApiClient

__all__ = [
    "GitHubAdapter",
    "GitHubApiClient",
]
