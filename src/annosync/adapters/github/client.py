"""
GitHub API Client - Low-level HTTP client for the GitHub REST API.

This handles the raw HTTP communication with GitHub.
The GitHubAdapter uses this to implement the IssueTrackerPort.
"""

import logging
from typing import Any, Optional

import requests

from ...core.ports.issue_tracker import (
    AuthenticationError,
    IssueTrackerError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ValidationError,
)


class GitHubApiClient:
    """
    Low-level GitHub REST API client.

    Handles authentication, request/response, pagination links and error
    handling. Without a token only public read access is available.
    """

    API_VERSION = "2022-11-28"

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the GitHub client.

        Args:
            base_url: API root (e.g., https://api.github.com)
            token: Personal access token, None for anonymous access
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger("GitHubApiClient")

        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

        self._authenticated = bool(token)
        self._session = requests.Session()
        self._session.headers.update(self.headers)

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """
        Make a request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, PATCH)
            endpoint: API endpoint (e.g., 'repos/owner/repo/issues') or an
                absolute URL taken from a pagination link
            **kwargs: Additional arguments for requests

        Returns:
            The successful response

        Raises:
            IssueTrackerError: On transport or API errors
        """
        if endpoint.startswith(("http://", "https://")):
            url = endpoint
        else:
            url = f"{self.base_url}/{endpoint.lstrip('/')}"

        kwargs.setdefault("timeout", self.timeout)
        self.logger.debug(f"{method} {url}")

        try:
            response = self._session.request(method, url, **kwargs)
        except requests.exceptions.ConnectionError as e:
            raise IssueTrackerError(f"Connection failed: {e}", cause=e)
        except requests.exceptions.Timeout as e:
            raise IssueTrackerError(f"Request timed out: {e}", cause=e)
        except requests.exceptions.RequestException as e:
            raise IssueTrackerError(f"Request failed: {e}", cause=e)

        return self._check_response(response, endpoint)

    def get(self, endpoint: str, **kwargs) -> requests.Response:
        """GET request."""
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> dict[str, Any]:
        """POST request, returns the decoded JSON body."""
        return self._json(self.request("POST", endpoint, json=json, **kwargs))

    def patch(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> dict[str, Any]:
        """PATCH request, returns the decoded JSON body."""
        return self._json(self.request("PATCH", endpoint, json=json, **kwargs))

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    def get_page(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
    ) -> tuple[list[dict[str, Any]], Optional[str]]:
        """
        Fetch one page of a list endpoint.

        Returns:
            The page items and the URL of the next page (None on the last page)
        """
        response = self.get(endpoint, params=params)
        items = self._json(response)
        if not isinstance(items, list):
            raise IssueTrackerError(
                f"Expected a list from {endpoint}, got {type(items).__name__}",
                issue_key=endpoint,
            )
        next_url = response.links.get("next", {}).get("url")
        return items, next_url

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _check_response(
        self,
        response: requests.Response,
        endpoint: str
    ) -> requests.Response:
        """Raise the matching IssueTrackerError for failed responses."""
        if response.ok:
            return response

        status = response.status_code
        error_body = response.text[:500] if response.text else ""
        self.logger.debug(f"GitHub API error {status} for {endpoint}: {error_body}")

        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Check GITHUB_TOKEN or ANNOSYNC_TOKEN_FILE."
            )

        if status in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            reset = response.headers.get("X-RateLimit-Reset")
            raise RateLimitError(
                f"Rate limit exceeded for {endpoint}",
                issue_key=endpoint,
                reset_at=int(reset) if reset and reset.isdigit() else None,
            )

        if status == 403:
            raise PermissionError(
                f"Permission denied for {endpoint}",
                issue_key=endpoint
            )

        if status == 404:
            raise NotFoundError(
                f"Not found: {endpoint}",
                issue_key=endpoint
            )

        if status == 422:
            raise ValidationError(
                f"Validation failed for {endpoint}: {error_body}",
                issue_key=endpoint
            )

        raise IssueTrackerError(
            f"API error {status}: {error_body}",
            issue_key=endpoint
        )

    def _json(self, response: requests.Response) -> Any:
        if not response.text:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise IssueTrackerError(f"Invalid JSON from GitHub: {e}", cause=e)
