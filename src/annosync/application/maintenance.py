"""
Maintenance - Bulk fixes to the issues that store annotations.

Used when a workflow is renamed: titles written with one prefix are moved
to another, and a label is swapped for another on the affected issues.
Both operations are dry-run unless told otherwise.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.domain.events import EventBus, IssueRelabeled, IssueRetitled
from ..core.ports.issue_tracker import IssueData, IssueTrackerPort, RepositoryRef
from .commands import UpdateIssueCommand
from .sync.scanner import IssueDirectoryScanner


@dataclass
class MaintenanceResult:
    """Result of a maintenance run."""

    success: bool = True
    dry_run: bool = True

    issues_scanned: int = 0
    issues_matched: int = 0
    issues_updated: int = 0

    # (issue number, old value, new value)
    changes: list[tuple[int, str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.success = False


class IssueMaintenance:
    """
    Rewrites titles and labels across every issue of a repository.

    Per-issue update failures are collected in the result; a failure to
    list issues aborts the run.
    """

    def __init__(
        self,
        tracker: IssueTrackerPort,
        repository: RepositoryRef,
        dry_run: bool = True,
        event_bus: Optional[EventBus] = None,
        per_page: int = 50,
    ):
        self.tracker = tracker
        self.repository = repository
        self.dry_run = dry_run
        self.event_bus = event_bus or EventBus()
        self.scanner = IssueDirectoryScanner(tracker, repository, per_page=per_page)
        self.logger = logging.getLogger("IssueMaintenance")

    def retitle(self, old_prefix: str, new_prefix: str) -> MaintenanceResult:
        """Replace ``old_prefix`` with ``new_prefix`` at the start of issue titles."""
        result = MaintenanceResult(dry_run=self.dry_run)

        for issue in self.scanner.issues(label=None):
            result.issues_scanned += 1
            if not issue.title.startswith(old_prefix):
                continue

            result.issues_matched += 1
            new_title = new_prefix + issue.title[len(old_prefix):]
            self.logger.info(f"Retitling #{issue.number}: {issue.title!r} -> {new_title!r}")

            if self._update(result, issue, title=new_title):
                result.changes.append((issue.number, issue.title, new_title))
                self.event_bus.publish(IssueRetitled(
                    issue_number=issue.number,
                    old_title=issue.title,
                    new_title=new_title,
                ))

        return result

    def relabel(
        self,
        old_label: str,
        new_label: str,
        title_prefix: Optional[str] = None,
    ) -> MaintenanceResult:
        """
        Swap ``old_label`` for ``new_label`` on issues carrying it.

        Args:
            old_label: Label to remove
            new_label: Label to put in its place
            title_prefix: Only touch issues whose title starts with this
        """
        result = MaintenanceResult(dry_run=self.dry_run)

        for issue in self.scanner.issues(label=old_label):
            result.issues_scanned += 1
            if title_prefix and not issue.title.startswith(title_prefix):
                continue
            if old_label not in issue.labels:
                continue

            result.issues_matched += 1
            labels = []
            for label in issue.labels:
                replacement = new_label if label == old_label else label
                if replacement not in labels:
                    labels.append(replacement)

            self.logger.info(f"Relabeling #{issue.number}: {old_label} -> {new_label}")

            if self._update(result, issue, labels=labels):
                result.changes.append((issue.number, old_label, new_label))
                self.event_bus.publish(IssueRelabeled(
                    issue_number=issue.number,
                    old_label=old_label,
                    new_label=new_label,
                ))

        return result

    def _update(
        self,
        result: MaintenanceResult,
        issue: IssueData,
        title: Optional[str] = None,
        labels: Optional[list[str]] = None,
    ) -> bool:
        cmd = UpdateIssueCommand(
            tracker=self.tracker,
            repository=self.repository,
            number=issue.number,
            title=title,
            labels=labels,
            event_bus=self.event_bus,
            dry_run=self.dry_run,
        )
        cmd_result = cmd.execute()

        if not cmd_result.success:
            result.add_error(f"#{issue.number}: {cmd_result.error}")
            return False

        if not cmd_result.dry_run:
            result.issues_updated += 1
        return True
