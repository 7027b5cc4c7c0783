"""
Config Provider Port - Abstract interface for configuration loading.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .issue_tracker import RepositoryRef


class Mode(Enum):
    """Whether the server may write to the tracker."""

    READ_ONLY = "read-only"
    READ_WRITE = "read-write"

    @classmethod
    def from_string(cls, s: str) -> "Mode":
        normalized = s.strip().lower().replace("_", "-")
        if normalized in ("rw", "readwrite"):
            return cls.READ_WRITE
        if normalized in ("ro", "readonly"):
            return cls.READ_ONLY
        return cls(normalized)


@dataclass
class TrackerConfig:
    """Configuration for the GitHub tracker."""

    api_url: str = "https://api.github.com"
    token: Optional[str] = None
    timeout: float = 30.0
    per_page: int = 50


@dataclass(frozen=True)
class WorkflowConfig:
    """
    One annotation workflow.

    Annotations of a workflow are stored as issues carrying ``label`` in
    ``repository`` and titled ``"<title_prefix> <annotation title>"``.
    """

    name: str
    label: str
    title_prefix: str
    repository: RepositoryRef


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 3000
    document: Path = Path("document.html")
    frontend_dir: Path = Path("frontend")


@dataclass
class AppConfig:
    """Complete application configuration."""

    tracker: TrackerConfig
    repository: RepositoryRef
    mode: Mode = Mode.READ_ONLY
    workflows: dict[str, WorkflowConfig] = field(default_factory=dict)
    server: ServerConfig = field(default_factory=ServerConfig)
    verbose: bool = False

    DEFAULT_WORKFLOW = "annotation"

    @property
    def read_only(self) -> bool:
        return self.mode is Mode.READ_ONLY

    def workflow(self, name: Optional[str] = None) -> WorkflowConfig:
        """Look up a workflow by name (KeyError if unknown)."""
        return self.workflows[name or self.DEFAULT_WORKFLOW]


class ConfigProviderPort(ABC):
    """Abstract interface for configuration providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration.

        Raises:
            ConfigError: If the configuration is incomplete or invalid
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a single configuration value."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """Validate configuration and return a list of problems."""
        ...
