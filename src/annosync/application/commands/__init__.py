"""
Commands - Individual write operations against the tracker.

Commands can be:
- Validated
- Executed (or previewed in dry-run)
- Logged for audit through the event bus
"""

from .base import Command, CommandResult
from .issue_commands import CreateIssueCommand, UpdateIssueCommand

__all__ = [
    "Command",
    "CommandResult",
    "CreateIssueCommand",
    "UpdateIssueCommand",
]
