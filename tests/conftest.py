"""Shared fixtures: an in-memory issue tracker and sample annotations."""

from dataclasses import replace
from typing import Optional

import pytest

from annosync.core.domain.annotation import (
    Annotation,
    Target,
    TextQuoteSelector,
    TextualBody,
)
from annosync.core.domain.embedding import embed
from annosync.core.ports.config_provider import WorkflowConfig
from annosync.core.ports.issue_tracker import (
    IssueData,
    IssuePage,
    IssueTrackerError,
    IssueTrackerPort,
    NotFoundError,
    RepositoryRef,
)


class FakeTracker(IssueTrackerPort):
    """
    In-memory tracker with real pagination.

    Failures are injected per operation through ``fail_on``
    ("list", "next", "create", "update").
    """

    def __init__(self, issues: Optional[list[IssueData]] = None, page_size: int = 2, writable: bool = True):
        self.issues: list[IssueData] = list(issues or [])
        self.page_size = page_size
        self.writable = writable
        self.fail_on: dict[str, IssueTrackerError] = {}

        self.list_calls: list[tuple] = []
        self.page_calls = 0
        self.created: list[IssueData] = []
        self.updates: list[dict] = []

    @property
    def name(self) -> str:
        return "Fake"

    @property
    def can_write(self) -> bool:
        return self.writable

    def list_issues(self, repository, label=None, state="all", per_page=50) -> IssuePage:
        self.list_calls.append((repository, label, state, per_page))
        if "list" in self.fail_on:
            raise self.fail_on["list"]
        return self._page(label, 0)

    def get_next_page(self, page: IssuePage) -> Optional[IssuePage]:
        if not page.next_url:
            return None
        self.page_calls += 1
        if "next" in self.fail_on:
            raise self.fail_on["next"]
        label, _, start = page.next_url.rpartition("|")
        return self._page(label or None, int(start))

    def create_issue(self, repository, title, body, labels=None) -> IssueData:
        if "create" in self.fail_on:
            raise self.fail_on["create"]
        number = max((i.number for i in self.issues), default=0) + 1
        issue = IssueData(number=number, title=title, body=body, labels=list(labels or []))
        self.issues.append(issue)
        self.created.append(issue)
        return replace(issue)

    def update_issue(self, repository, number, title=None, body=None, labels=None) -> IssueData:
        if "update" in self.fail_on:
            raise self.fail_on["update"]
        issue = self.get(number)
        if issue is None:
            raise NotFoundError(f"Not found: #{number}")
        if title is not None:
            issue.title = title
        if body is not None:
            issue.body = body
        if labels is not None:
            issue.labels = list(labels)
        self.updates.append({"number": number, "title": title, "body": body, "labels": labels})
        return replace(issue)

    def get(self, number: int) -> Optional[IssueData]:
        for issue in self.issues:
            if issue.number == number:
                return issue
        return None

    def _page(self, label: Optional[str], start: int) -> IssuePage:
        matching = [i for i in self.issues if label is None or label in i.labels]
        end = start + self.page_size
        next_url = f"{label or ''}|{end}" if end < len(matching) else None
        items = [replace(i, labels=list(i.labels)) for i in matching[start:end]]
        return IssuePage(items=items, next_url=next_url)


def make_annotation(annotation_id: str = "#abc", comment: Optional[str] = "Typo here", exact: Optional[str] = "calrify") -> Annotation:
    body = (TextualBody(purpose="commenting", value=comment),) if comment is not None else ()
    selector = (TextQuoteSelector(exact=exact),) if exact is not None else ()
    return Annotation(id=annotation_id, body=body, target=Target(selector=selector))


def stored_issue(
    number: int,
    annotation: Annotation,
    label: str = "annotation",
    state: str = "open",
    prefix: str = "> quote\r\n\r\n",
    suffix: str = "\r\n</details>",
) -> IssueData:
    return IssueData(
        number=number,
        title=f"[Annotation] {annotation.title()}",
        body=embed(prefix, annotation, suffix),
        state=state,
        labels=[label],
    )


@pytest.fixture
def repository():
    return RepositoryRef(owner="acme", repo="notes")


@pytest.fixture
def workflow(repository):
    return WorkflowConfig(
        name="annotation",
        label="annotation",
        title_prefix="[Annotation]",
        repository=repository,
    )


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def sample_annotation():
    return make_annotation()
