"""Environment-driven configuration for Taskbridge."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from taskbridge.core.models import Repository

logger = logging.getLogger(__name__)

REPOS_ENV_VAR = "TASKBRIDGE_GITHUB_REPOS"
DEFAULT_REPOSITORIES = [
    Repository(name="example-repo", repo="owner/repository", default_branch="main")
]


def get_config_dir() -> Path:
    """Get the directory holding config/repos.json, defaulting to cwd."""
    return Path(os.environ.get("TASKBRIDGE_CONFIG_DIR", os.getcwd()))


def _parse_repositories(raw: object) -> List[Repository]:
    if not isinstance(raw, list):
        raise ValueError("repository configuration must be a list")
    return [Repository.model_validate(item) for item in raw]


def load_repositories() -> List[Repository]:
    """Load configured repositories.

    Resolution order:
    1. TASKBRIDGE_GITHUB_REPOS environment variable (JSON list)
    2. config/repos.json under the config directory ({"repositories": [...]})
    3. A single placeholder repository

    Malformed configuration is logged and replaced by the placeholder.

    Returns:
        List of Repository models
    """
    try:
        env_value = os.environ.get(REPOS_ENV_VAR)
        if env_value:
            return _parse_repositories(json.loads(env_value))

        config_path = get_config_dir() / "config" / "repos.json"
        if config_path.is_file():
            config = json.loads(config_path.read_text(encoding="utf-8"))
            return _parse_repositories(config.get("repositories"))

        logger.warning("No repository configuration found, using default repository")
        return list(DEFAULT_REPOSITORIES)
    except (ValueError, ValidationError, AttributeError) as e:
        logger.error("Error loading repository configuration: %s", e)
        logger.error("Using default repository configuration")
        return list(DEFAULT_REPOSITORIES)


class GitHubConfig:
    """Configuration for the GitHub adapter."""

    def __init__(self) -> None:
        self.token: Optional[str] = os.environ.get("GITHUB_TOKEN")
        self.api_url: str = os.environ.get("GITHUB_API_URL", "https://api.github.com")
        self.repositories: List[Repository] = load_repositories()

    def validate(self) -> None:
        """Validate required environment variables are set."""
        if not self.token:
            raise ValueError(
                "Missing required GitHub environment variable: GITHUB_TOKEN. "
                "Please set it in your environment or .env file."
            )


class TrelloConfig:
    """Configuration for the Trello adapter."""

    def __init__(self) -> None:
        self.api_key: Optional[str] = os.environ.get("TRELLO_API_KEY")
        self.token: Optional[str] = os.environ.get("TRELLO_TOKEN")
        self.board_id: Optional[str] = os.environ.get("TRELLO_BOARD_ID") or None
        self.list_id: Optional[str] = os.environ.get("TRELLO_LIST_ID") or None
        self.api_url: str = os.environ.get("TRELLO_API_URL", "https://api.trello.com")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.token)

    def validate(self) -> None:
        """Validate required environment variables are set."""
        missing = []

        if not self.api_key:
            missing.append("TRELLO_API_KEY")
        if not self.token:
            missing.append("TRELLO_TOKEN")

        if missing:
            raise ValueError(
                f"Missing required Trello environment variables: "
                f"{', '.join(missing)}. "
                f"Please set these in your environment or .env file."
            )


@dataclass
class AppConfig:
    """Process-level settings.

    Attributes:
        http_timeout: Timeout in seconds for remote calls
        docs_dir: Directory containing company documentation markdown
        wp_path: Working directory for WP-CLI commands
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """

    http_timeout: float = 30.0
    docs_dir: str = field(default_factory=lambda: os.path.join(os.getcwd(), "docs"))
    wp_path: str = field(default_factory=os.getcwd)
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration values."""
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")

        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build settings from TASKBRIDGE_* environment variables."""
        kwargs = {}
        timeout = os.environ.get("TASKBRIDGE_HTTP_TIMEOUT")
        if timeout:
            try:
                kwargs["http_timeout"] = float(timeout)
            except ValueError as e:
                raise ValueError(f"TASKBRIDGE_HTTP_TIMEOUT must be a number, got '{timeout}'") from e
        if os.environ.get("TASKBRIDGE_DOCS_DIR"):
            kwargs["docs_dir"] = os.environ["TASKBRIDGE_DOCS_DIR"]
        if os.environ.get("TASKBRIDGE_WP_PATH"):
            kwargs["wp_path"] = os.environ["TASKBRIDGE_WP_PATH"]
        if os.environ.get("TASKBRIDGE_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["TASKBRIDGE_LOG_LEVEL"]
        return cls(**kwargs)
