"""
GitHub Adapter - Implements IssueTrackerPort for GitHub issues.

This is the main entry point for GitHub integration.
"""

import logging
from typing import Any, Optional

from ...core.ports.config_provider import TrackerConfig
from ...core.ports.issue_tracker import (
    IssueData,
    IssuePage,
    IssueTrackerPort,
    RepositoryRef,
)
from .client import GitHubApiClient


class GitHubAdapter(IssueTrackerPort):
    """
    GitHub implementation of the IssueTrackerPort.

    Translates between the port's issue types and GitHub's API. One
    instance is built at startup and shared by every workflow.
    """

    def __init__(
        self,
        config: TrackerConfig,
        client: Optional[GitHubApiClient] = None,
    ):
        """
        Initialize the GitHub adapter.

        Args:
            config: Tracker configuration
            client: Optional preconfigured API client
        """
        self.config = config
        self.logger = logging.getLogger("GitHubAdapter")

        self._client = client or GitHubApiClient(
            base_url=config.api_url,
            token=config.token,
            timeout=config.timeout,
        )

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "GitHub"

    @property
    def can_write(self) -> bool:
        return self._client.is_authenticated

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def list_issues(
        self,
        repository: RepositoryRef,
        label: Optional[str] = None,
        state: str = "all",
        per_page: int = 50,
    ) -> IssuePage:
        params: dict[str, Any] = {"state": state, "per_page": per_page}
        if label:
            params["labels"] = label

        items, next_url = self._client.get_page(
            f"repos/{repository.owner}/{repository.repo}/issues",
            params=params,
        )
        self.logger.debug(f"Listed {len(items)} issues from {repository} (label={label})")
        return self._parse_page(items, next_url)

    def get_next_page(self, page: IssuePage) -> Optional[IssuePage]:
        if not page.next_url:
            return None

        items, next_url = self._client.get_page(page.next_url)
        self.logger.debug(f"Fetched next page with {len(items)} issues")
        return self._parse_page(items, next_url)

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def create_issue(
        self,
        repository: RepositoryRef,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
    ) -> IssueData:
        payload: dict[str, Any] = {"title": title, "body": body}
        if labels:
            payload["labels"] = list(labels)

        data = self._client.post(
            f"repos/{repository.owner}/{repository.repo}/issues",
            json=payload,
        )
        issue = self._parse_issue(data)
        self.logger.info(f"Created issue #{issue.number} in {repository}")
        return issue

    def update_issue(
        self,
        repository: RepositoryRef,
        number: int,
        title: Optional[str] = None,
        body: Optional[str] = None,
        labels: Optional[list[str]] = None,
    ) -> IssueData:
        payload: dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if body is not None:
            payload["body"] = body
        if labels is not None:
            payload["labels"] = list(labels)

        data = self._client.patch(
            f"repos/{repository.owner}/{repository.repo}/issues/{number}",
            json=payload,
        )
        issue = self._parse_issue(data)
        self.logger.info(f"Updated issue #{number} in {repository}")
        return issue

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _parse_page(self, items: list[dict], next_url: Optional[str]) -> IssuePage:
        return IssuePage(
            items=[self._parse_issue(item) for item in items],
            next_url=next_url,
        )

    def _parse_issue(self, data: dict) -> IssueData:
        """Parse a GitHub API issue into IssueData."""
        labels = []
        for label in data.get("labels") or []:
            # Labels come back as objects, but may be plain strings
            labels.append(label["name"] if isinstance(label, dict) else str(label))

        return IssueData(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            state=data.get("state", "open"),
            labels=labels,
            url=data.get("html_url"),
        )
