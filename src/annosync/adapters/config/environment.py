"""
Environment Config Provider - Load configuration from environment variables.

Supports:
- Environment variables (ANNOSYNC_OWNER, ANNOSYNC_REPO, GITHUB_TOKEN, ...)
- .env files
- A token file holding the personal access token (ANNOSYNC_TOKEN_FILE)
- Command line argument overrides
"""

import os
from pathlib import Path
from typing import Any, Optional

from ...core.exceptions import ConfigError
from ...core.ports.config_provider import (
    AppConfig,
    ConfigProviderPort,
    Mode,
    ServerConfig,
    TrackerConfig,
    WorkflowConfig,
)
from ...core.ports.issue_tracker import RepositoryRef


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from environment variables and .env files.

    Priority (highest first): CLI overrides, environment, .env file, defaults.
    """

    DEFAULTS: dict[str, Any] = {
        "api_url": "https://api.github.com",
        "mode": "read-only",
        "document": "document.html",
        "frontend_dir": "frontend",
        "host": "127.0.0.1",
        "port": 3000,
        "label": "annotation",
        "title_prefix": "[Annotation]",
        "validation_label": "validation",
        "validation_title_prefix": "[Validation]",
        "per_page": 50,
        "timeout": 30,
        "verbose": False,
    }

    ENV_MAPPING = {
        "GITHUB_API_URL": "api_url",
        "GITHUB_TOKEN": "token",
        "ANNOSYNC_TOKEN_FILE": "token_file",
        "ANNOSYNC_MODE": "mode",
        "ANNOSYNC_OWNER": "owner",
        "ANNOSYNC_REPO": "repo",
        "ANNOSYNC_DOCUMENT": "document",
        "ANNOSYNC_FRONTEND": "frontend_dir",
        "ANNOSYNC_HOST": "host",
        "ANNOSYNC_PORT": "port",
        "ANNOSYNC_LABEL": "label",
        "ANNOSYNC_TITLE_PREFIX": "title_prefix",
        "ANNOSYNC_VALIDATION_LABEL": "validation_label",
        "ANNOSYNC_VALIDATION_TITLE_PREFIX": "validation_title_prefix",
        "ANNOSYNC_PER_PAGE": "per_page",
        "ANNOSYNC_TIMEOUT": "timeout",
        "ANNOSYNC_VERBOSE": "verbose",
    }

    def __init__(
        self,
        env_file: Optional[Path] = None,
        cli_overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the config provider.

        Args:
            env_file: Path to .env file (auto-detected if not specified)
            cli_overrides: Command line argument overrides
            environ: Environment to read instead of os.environ
        """
        self._values: dict[str, Any] = {}
        self._env_file = env_file
        self._cli_overrides = {
            self._normalize(k): v
            for k, v in (cli_overrides or {}).items()
            if v is not None
        }
        self._environ = os.environ if environ is None else environ

        self._load_env_file()
        self._load_environment()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Environment"

    def load(self) -> AppConfig:
        """
        Load complete configuration.

        Raises:
            ConfigError: If validation finds any problem
        """
        problems = self.validate()
        if problems:
            raise ConfigError(
                "Invalid configuration:\n  " + "\n  ".join(problems),
                problems=problems,
            )

        repository = RepositoryRef(owner=self.get("owner"), repo=self.get("repo"))

        tracker = TrackerConfig(
            api_url=self.get("api_url"),
            token=self._token(),
            timeout=float(self.get("timeout")),
            per_page=int(self.get("per_page")),
        )

        workflows = {
            "annotation": WorkflowConfig(
                name="annotation",
                label=self.get("label"),
                title_prefix=self.get("title_prefix"),
                repository=repository,
            ),
            "validation": WorkflowConfig(
                name="validation",
                label=self.get("validation_label"),
                title_prefix=self.get("validation_title_prefix"),
                repository=repository,
            ),
        }

        server = ServerConfig(
            host=self.get("host"),
            port=int(self.get("port")),
            document=Path(self.get("document")),
            frontend_dir=Path(self.get("frontend_dir")),
        )

        return AppConfig(
            tracker=tracker,
            repository=repository,
            mode=Mode.from_string(str(self.get("mode"))),
            workflows=workflows,
            server=server,
            verbose=self._as_bool(self.get("verbose")),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        key = self._normalize(key)

        if key in self._cli_overrides:
            return self._cli_overrides[key]

        if key in self._values:
            return self._values[key]

        if default is None:
            return self.DEFAULTS.get(key)
        return default

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        self._values[self._normalize(key)] = value

    def validate(self) -> list[str]:
        """Validate configuration."""
        errors = []

        if not self.get("owner"):
            errors.append("Missing ANNOSYNC_OWNER - set in environment or .env file")
        if not self.get("repo"):
            errors.append("Missing ANNOSYNC_REPO - set in environment or .env file")

        try:
            mode = Mode.from_string(str(self.get("mode")))
        except ValueError:
            errors.append(f"Invalid ANNOSYNC_MODE: {self.get('mode')!r} (use read-only or read-write)")
            mode = None

        if mode is Mode.READ_WRITE:
            try:
                if not self._token():
                    errors.append(
                        "Read-write mode needs a token - set GITHUB_TOKEN or ANNOSYNC_TOKEN_FILE"
                    )
            except ConfigError as e:
                errors.append(str(e))

        for key in ("port", "per_page"):
            try:
                if int(self.get(key)) <= 0:
                    errors.append(f"{key} must be positive")
            except (TypeError, ValueError):
                errors.append(f"{key} must be an integer, got {self.get(key)!r}")

        try:
            float(self.get("timeout"))
        except (TypeError, ValueError):
            errors.append(f"timeout must be a number, got {self.get('timeout')!r}")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _token(self) -> Optional[str]:
        """Token from GITHUB_TOKEN, else read (and trimmed) from the token file."""
        token = self.get("token")
        if token:
            return str(token).strip()

        token_file = self.get("token_file")
        if not token_file:
            return None

        path = Path(token_file).expanduser()
        try:
            return path.read_text().strip() or None
        except OSError as e:
            raise ConfigError(f"Cannot read token file {path}: {e}")

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return

        for line in env_file.read_text().splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")

            config_key = self.ENV_MAPPING.get(key.upper(), key)
            self._values[self._normalize(config_key)] = value

    def _find_env_file(self) -> Optional[Path]:
        """Find .env file."""
        if self._env_file:
            return self._env_file if self._env_file.exists() else None

        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    def _load_environment(self) -> None:
        """Load values from environment variables."""
        for env_key, config_key in self.ENV_MAPPING.items():
            raw_value = self._environ.get(env_key)
            if raw_value is not None:
                self._values[config_key] = raw_value

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lower().replace("-", "_")

    @staticmethod
    def _as_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)
