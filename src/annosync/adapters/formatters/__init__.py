"""
Formatters - Render annotations into issue text.
"""

from .issue_body import MarkdownIssueFormatter

__all__ = ["MarkdownIssueFormatter"]
