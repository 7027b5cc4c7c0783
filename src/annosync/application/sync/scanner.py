"""
Issue Directory Scanner - Find annotations stored in tracker issues.

There is no index from annotation id to issue: every lookup pages through
all issues carrying the workflow label and decodes each body. Cost is
linear in the number of labeled issues (one round trip per page), which
bounds how many annotations a repository can hold before upserts get slow.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from ...core.domain.annotation import Annotation, Status
from ...core.domain.embedding import EmbeddedBlock, extract
from ...core.ports.issue_tracker import IssueData, IssueTrackerPort, RepositoryRef


@dataclass(frozen=True)
class ScannedIssue:
    """An issue together with the annotation decoded from its body."""

    issue: IssueData
    block: EmbeddedBlock

    @property
    def annotation(self) -> Annotation:
        return self.block.annotation


class IssueDirectoryScanner:
    """
    Pages through labeled issues and decodes their embedded annotations.

    Issues without a block, or whose block fails to decode, are skipped.
    A malformed stored annotation is therefore invisible to listings and
    to matching; it is logged, not raised.
    """

    def __init__(
        self,
        tracker: IssueTrackerPort,
        repository: RepositoryRef,
        per_page: int = 50,
    ):
        self.tracker = tracker
        self.repository = repository
        self.per_page = per_page
        self.logger = logging.getLogger("IssueDirectoryScanner")

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    def issues(self, label: Optional[str]) -> Iterator[IssueData]:
        """
        Yield every issue with ``label`` in any state, page by page.

        Pages are fetched lazily and strictly one after another.
        IssueTrackerError propagates and ends the iteration.
        """
        page = self.tracker.list_issues(
            self.repository, label=label, state="all", per_page=self.per_page
        )
        while page is not None:
            yield from page
            page = self.tracker.get_next_page(page)

    def scan(self, label: str) -> Iterator[ScannedIssue]:
        """Yield every labeled issue whose body holds a decodable annotation."""
        for issue in self.issues(label):
            if not issue.body:
                continue

            block = extract(issue.body)
            if block is None:
                continue

            if not block.ok:
                self.logger.warning(
                    f"Skipping issue #{issue.number}: malformed annotation block ({block.error})"
                )
                continue

            yield ScannedIssue(issue=issue, block=block)

    def find_by_id(self, label: str, annotation_id: str) -> Optional[ScannedIssue]:
        """
        First issue (in listing order) storing the annotation ``annotation_id``.

        Stops fetching pages as soon as a match is found.
        """
        for scanned in self.scan(label):
            if scanned.annotation.id == annotation_id:
                self.logger.debug(f"Annotation {annotation_id} found in issue #{scanned.issue.number}")
                return scanned
        return None

    def list_annotations(self, label: str) -> list[Annotation]:
        """
        All stored annotations with ``meta`` set from the issue state.

        Whatever ``meta`` the stored payload carries is replaced.
        """
        annotations = [
            scanned.annotation.with_status(Status.from_issue_state(scanned.issue.state))
            for scanned in self.scan(label)
        ]
        self.logger.info(f"Listed {len(annotations)} annotations with label '{label}'")
        return annotations
