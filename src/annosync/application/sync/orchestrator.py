"""
Sync Orchestrator - Store annotations in tracker issues.

Upsert flow:

    Received -> find issue by annotation id
        Matched   -> replace the embedded block, retitle -> Updated (202)
        Unmatched -> render a new issue body, create    -> Created (201)
    any tracker failure                                  -> Failed  (406)

The read-only/read-write gate is the caller's job; the engine assumes it
may write.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...adapters.formatters.issue_body import MarkdownIssueFormatter
from ...core.domain.annotation import Annotation
from ...core.domain.events import AnnotationMatched, EventBus, UpsertFailed
from ...core.ports.config_provider import WorkflowConfig
from ...core.ports.issue_formatter import IssueFormatterPort
from ...core.ports.issue_tracker import IssueTrackerError, IssueTrackerPort
from ..commands import CreateIssueCommand, UpdateIssueCommand
from .scanner import IssueDirectoryScanner


class SyncOutcome(Enum):
    """Terminal outcome of a sync operation, valued by its HTTP status code."""

    CREATED = 201
    UPDATED = 202
    FAILED = 406
    NOT_IMPLEMENTED = 501

    @property
    def status_code(self) -> int:
        return self.value


@dataclass
class UpsertResult:
    """Result of storing one annotation."""

    outcome: SyncOutcome
    annotation_id: Optional[str] = None
    issue_number: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome in (SyncOutcome.CREATED, SyncOutcome.UPDATED)


class IdentityLocks:
    """
    One lock per annotation id.

    Held across find-then-create so two concurrent upserts of the same new
    annotation in this process cannot both miss the match and create two
    issues. Separate processes are not coordinated.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._waiters: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[key] -= 1
                if not self._waiters[key]:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class AnnotationSyncEngine:
    """
    Stores and lists the annotations of one workflow.

    A workflow names the label, title prefix and repository; the
    "annotation" and "validation" workflows are two engines sharing one
    tracker.
    """

    def __init__(
        self,
        tracker: IssueTrackerPort,
        workflow: WorkflowConfig,
        formatter: Optional[IssueFormatterPort] = None,
        event_bus: Optional[EventBus] = None,
        locks: Optional[IdentityLocks] = None,
        per_page: int = 50,
    ):
        """
        Initialize the engine.

        Args:
            tracker: Shared issue tracker port
            workflow: Label, title prefix and repository of this workflow
            formatter: Issue text renderer (markdown by default)
            event_bus: Optional event bus
            locks: Per-annotation locks, shared between engines if given
            per_page: Page size for issue listings
        """
        self.tracker = tracker
        self.workflow = workflow
        self.formatter = formatter or MarkdownIssueFormatter()
        self.event_bus = event_bus or EventBus()
        self.locks = locks or IdentityLocks()
        self.scanner = IssueDirectoryScanner(tracker, workflow.repository, per_page=per_page)
        self.logger = logging.getLogger("AnnotationSyncEngine")

    # -------------------------------------------------------------------------
    # Main Entry Points
    # -------------------------------------------------------------------------

    def list_annotations(self) -> list[Annotation]:
        """
        All annotations of this workflow, ``meta`` stamped from issue state.

        Raises:
            IssueTrackerError: If any page cannot be fetched
        """
        return self.scanner.list_annotations(self.workflow.label)

    def upsert(self, annotation: Annotation) -> UpsertResult:
        """Update the issue storing ``annotation`` or create one."""
        annotation = annotation.without_meta()

        with self.locks.hold(annotation.id):
            try:
                match = self.scanner.find_by_id(self.workflow.label, annotation.id)
            except IssueTrackerError as e:
                return self._failed(annotation, f"Issue lookup failed: {e}")

            if match is None:
                return self._create(annotation)

            self.event_bus.publish(AnnotationMatched(
                annotation_id=annotation.id,
                issue_number=match.issue.number,
            ))
            return self._update(annotation, match.issue.number, match.block.prefix, match.block.suffix)

    def delete(self, annotation_id: Optional[str] = None) -> UpsertResult:
        """Deletion is not supported; always NOT_IMPLEMENTED."""
        self.logger.info(f"Delete requested for {annotation_id or 'an annotation'}; not implemented")
        return UpsertResult(outcome=SyncOutcome.NOT_IMPLEMENTED, annotation_id=annotation_id)

    # -------------------------------------------------------------------------
    # Upsert Branches
    # -------------------------------------------------------------------------

    def _update(
        self,
        annotation: Annotation,
        number: int,
        prefix: str,
        suffix: str,
    ) -> UpsertResult:
        cmd = UpdateIssueCommand(
            tracker=self.tracker,
            repository=self.workflow.repository,
            number=number,
            title=self.formatter.format_title(self.workflow.title_prefix, annotation),
            body=self.formatter.format_updated_body(prefix, annotation, suffix),
            event_bus=self.event_bus,
        )
        result = cmd.execute()
        if not result.success:
            return self._failed(annotation, result.error, number)

        self.logger.info(f"Updated annotation {annotation.id} in issue #{number}")
        return UpsertResult(
            outcome=SyncOutcome.UPDATED,
            annotation_id=annotation.id,
            issue_number=number,
        )

    def _create(self, annotation: Annotation) -> UpsertResult:
        cmd = CreateIssueCommand(
            tracker=self.tracker,
            repository=self.workflow.repository,
            title=self.formatter.format_title(self.workflow.title_prefix, annotation),
            body=self.formatter.format_new_body(annotation),
            labels=[self.workflow.label],
            event_bus=self.event_bus,
        )
        result = cmd.execute()
        if not result.success:
            return self._failed(annotation, result.error)

        self.logger.info(f"Created issue #{result.data.number} for annotation {annotation.id}")
        return UpsertResult(
            outcome=SyncOutcome.CREATED,
            annotation_id=annotation.id,
            issue_number=result.data.number,
        )

    def _failed(
        self,
        annotation: Annotation,
        error: Optional[str],
        number: Optional[int] = None,
    ) -> UpsertResult:
        self.logger.error(f"Could not store annotation {annotation.id}: {error}")
        self.event_bus.publish(UpsertFailed(annotation_id=annotation.id, error=error or ""))
        return UpsertResult(
            outcome=SyncOutcome.FAILED,
            annotation_id=annotation.id,
            issue_number=number,
            error=error,
        )
