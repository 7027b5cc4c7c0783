"""
Issue Commands - Create and update tracker issues.

Transport failures are turned into failed results here, so callers decide
how to report them.
"""

from typing import Optional

from ...core.domain.events import EventBus, IssueCreated, IssueUpdated
from ...core.ports.issue_tracker import IssueTrackerError, IssueTrackerPort, RepositoryRef
from .base import Command, CommandResult


class CreateIssueCommand(Command):
    """Create a new issue. Result data is the created IssueData."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        repository: RepositoryRef,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
        event_bus: Optional[EventBus] = None,
        dry_run: bool = False,
    ):
        super().__init__(event_bus=event_bus, dry_run=dry_run)
        self.tracker = tracker
        self.repository = repository
        self.title = title
        self.body = body
        self.labels = list(labels or [])

    @property
    def description(self) -> str:
        return f"create issue '{self.title[:50]}' in {self.repository}"

    def validate(self) -> Optional[str]:
        if not self.title:
            return "Issue title is required"
        return None

    def _execute(self) -> CommandResult:
        try:
            issue = self.tracker.create_issue(
                self.repository, self.title, self.body, labels=self.labels
            )
        except IssueTrackerError as e:
            self.logger.error(f"Failed to {self.description}: {e}")
            return CommandResult.fail(str(e))

        self._publish(IssueCreated(
            issue_number=issue.number,
            title=self.title,
            labels=tuple(self.labels),
        ))
        return CommandResult.ok(issue)


class UpdateIssueCommand(Command):
    """Update title, body and/or labels of an issue. Result data is the IssueData."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        repository: RepositoryRef,
        number: int,
        title: Optional[str] = None,
        body: Optional[str] = None,
        labels: Optional[list[str]] = None,
        event_bus: Optional[EventBus] = None,
        dry_run: bool = False,
    ):
        super().__init__(event_bus=event_bus, dry_run=dry_run)
        self.tracker = tracker
        self.repository = repository
        self.number = number
        self.title = title
        self.body = body
        self.labels = labels

    @property
    def description(self) -> str:
        return f"update issue #{self.number} in {self.repository}"

    def validate(self) -> Optional[str]:
        if not self.number:
            return "Issue number is required"
        if self.title is None and self.body is None and self.labels is None:
            return f"Nothing to update for issue #{self.number}"
        return None

    def _execute(self) -> CommandResult:
        try:
            issue = self.tracker.update_issue(
                self.repository,
                self.number,
                title=self.title,
                body=self.body,
                labels=self.labels,
            )
        except IssueTrackerError as e:
            self.logger.error(f"Failed to {self.description}: {e}")
            return CommandResult.fail(str(e))

        self._publish(IssueUpdated(
            issue_number=self.number,
            title=self.title,
            body_changed=self.body is not None,
            labels=tuple(self.labels) if self.labels is not None else None,
        ))
        return CommandResult.ok(issue)
