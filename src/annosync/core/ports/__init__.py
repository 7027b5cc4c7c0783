"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .issue_tracker import (
    AuthenticationError,
    IssueData,
    IssuePage,
    IssueTrackerError,
    IssueTrackerPort,
    NotFoundError,
    PermissionError,
    RateLimitError,
    RepositoryRef,
    ValidationError,
)
from .issue_formatter import IssueFormatterPort
from .config_provider import (
    AppConfig,
    ConfigProviderPort,
    Mode,
    ServerConfig,
    TrackerConfig,
    WorkflowConfig,
)

__all__ = [
    "AuthenticationError",
    "IssueData",
    "IssuePage",
    "IssueTrackerError",
    "IssueTrackerPort",
    "NotFoundError",
    "PermissionError",
    "RateLimitError",
    "RepositoryRef",
    "ValidationError",
    "IssueFormatterPort",
    "AppConfig",
    "ConfigProviderPort",
    "Mode",
    "ServerConfig",
    "TrackerConfig",
    "WorkflowConfig",
]
