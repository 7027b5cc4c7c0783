"""
Application Layer - Use cases, commands, and orchestration.

This layer contains:
- commands/: Individual write operations (CreateIssue, UpdateIssue)
- sync/: Issue scanning and the annotation upsert engine
- maintenance: Bulk retitle / relabel runs
"""

from .sync import AnnotationSyncEngine, IssueDirectoryScanner, SyncOutcome, UpsertResult
from .commands import (
    Command,
    CommandResult,
    CreateIssueCommand,
    UpdateIssueCommand,
)
from .maintenance import IssueMaintenance, MaintenanceResult

__all__ = [
    "AnnotationSyncEngine",
    "IssueDirectoryScanner",
    "SyncOutcome",
    "UpsertResult",
    "Command",
    "CommandResult",
    "CreateIssueCommand",
    "UpdateIssueCommand",
    "IssueMaintenance",
    "MaintenanceResult",
]
