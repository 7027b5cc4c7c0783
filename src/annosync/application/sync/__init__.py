"""
Sync Module - Storing annotations in, and reading them back from, the tracker.
"""

from .orchestrator import (
    AnnotationSyncEngine,
    IdentityLocks,
    SyncOutcome,
    UpsertResult,
)
from .scanner import IssueDirectoryScanner, ScannedIssue

__all__ = [
    "AnnotationSyncEngine",
    "IdentityLocks",
    "SyncOutcome",
    "UpsertResult",
    "IssueDirectoryScanner",
    "ScannedIssue",
]
