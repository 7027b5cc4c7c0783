"""
Adapters - Concrete implementations of ports.

This module contains implementations for:
- Issue Trackers: GitHub
- Formatters: Markdown issue bodies
- Config: Environment variables
"""

from .github import GitHubAdapter
from .formatters import MarkdownIssueFormatter
from .config import EnvironmentConfigProvider

__all__ = [
    "GitHubAdapter",
    "MarkdownIssueFormatter",
    "EnvironmentConfigProvider",
]
