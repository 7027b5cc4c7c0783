"""
Issue Tracker Port - Abstract interface for issue trackers.

The tracker is the annotation store: every annotation lives in the body of
one issue. Implementations: GitHub (see adapters/github).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


class IssueTrackerError(Exception):
    """Base exception for issue tracker errors."""

    def __init__(
        self,
        message: str,
        issue_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.issue_key = issue_key
        self.cause = cause


class AuthenticationError(IssueTrackerError):
    """Authentication failed."""


class NotFoundError(IssueTrackerError):
    """Issue or repository not found."""


class PermissionError(IssueTrackerError):
    """Insufficient permissions."""


class RateLimitError(IssueTrackerError):
    """API rate limit exhausted."""

    def __init__(
        self,
        message: str,
        issue_key: Optional[str] = None,
        reset_at: Optional[int] = None,
    ):
        super().__init__(message, issue_key=issue_key)
        self.reset_at = reset_at


class ValidationError(IssueTrackerError):
    """The tracker rejected the request payload."""


@dataclass(frozen=True)
class RepositoryRef:
    """An ``owner/repo`` pair on the tracker."""

    owner: str
    repo: str

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """Parse ``owner/repo``."""
        owner, sep, repo = value.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected owner/repo, got {value!r}")
        return cls(owner=owner, repo=repo)

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class IssueData:
    """Generic issue data returned from the tracker."""

    number: int
    title: str = ""
    body: Optional[str] = None
    state: str = "open"
    labels: list[str] = field(default_factory=list)
    url: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state == "open"


@dataclass
class IssuePage:
    """
    One page of an issue listing.

    ``next_url`` is an opaque cursor for ``get_next_page``; None on the
    last page.
    """

    items: list[IssueData] = field(default_factory=list)
    next_url: Optional[str] = None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class IssueTrackerPort(ABC):
    """
    Abstract interface for issue tracker operations.

    All operations are single blocking round trips. Transport failures
    raise IssueTrackerError (or a subclass); nothing is retried.
    """

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name (e.g., 'GitHub')."""
        ...

    @property
    @abstractmethod
    def can_write(self) -> bool:
        """Whether the tracker was given credentials for write operations."""
        ...

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_issues(
        self,
        repository: RepositoryRef,
        label: Optional[str] = None,
        state: str = "all",
        per_page: int = 50,
    ) -> IssuePage:
        """
        Fetch the first page of issues.

        Args:
            repository: Repository to list
            label: Only issues carrying this label (None for all issues)
            state: 'open', 'closed' or 'all'
            per_page: Page size

        Returns:
            First page of the listing
        """
        ...

    @abstractmethod
    def get_next_page(self, page: IssuePage) -> Optional[IssuePage]:
        """Fetch the page after ``page``, or None if it was the last one."""
        ...

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def create_issue(
        self,
        repository: RepositoryRef,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
    ) -> IssueData:
        """Create an issue and return it."""
        ...

    @abstractmethod
    def update_issue(
        self,
        repository: RepositoryRef,
        number: int,
        title: Optional[str] = None,
        body: Optional[str] = None,
        labels: Optional[list[str]] = None,
    ) -> IssueData:
        """
        Update an issue. Fields left as None are not changed.

        Returns:
            The updated issue
        """
        ...
