"""Configuration management using pydantic-settings.

Provides validated configuration with support for:
- Environment variables (SLACK_TOKEN, SLACK_SESSION_COOKIE, ...)
- An optional .env file
- An optional JSON config file
- Type coercion and validation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from slack_emoji import __version__
from slack_emoji.sync.pagination import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_STARTING_PAGE,
    StreamParameters,
)


class ConfigurationError(Exception):
    """Raised when the sync cannot start because of bad configuration."""


class SyncSettings(BaseSettings):
    """Settings for one sync run.

    Values come from keyword arguments first, then SLACK_* environment
    variables, then the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SLACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace: str
    token: str
    session_cookie: str = ""
    target_directory: Path

    starting_page: int = Field(default=DEFAULT_STARTING_PAGE, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=1000)
    limit_num_pages: int | None = Field(default=None, ge=1)

    user_agent: str = f"slack-emoji/{__version__}"
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("workspace", mode="before")
    @classmethod
    def normalize_workspace(cls, v: Any) -> Any:
        """Accept either "myorg" or "myorg.slack.com"."""
        if not isinstance(v, str):
            return v
        workspace = v.strip()
        for prefix in ("https://", "http://"):
            workspace = workspace.removeprefix(prefix)
        workspace = workspace.split("/", 1)[0].removesuffix(".slack.com")
        if not workspace:
            raise ValueError("workspace must not be empty")
        return workspace

    @field_validator("token")
    @classmethod
    def token_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("token must not be empty")
        return v.strip()

    @property
    def base_url(self) -> str:
        """Base URL for the workspace's web API."""
        return f"https://{self.workspace}.slack.com/api"

    def stream_parameters(self) -> StreamParameters:
        """Pagination tuning for the remote emoji stream."""
        return StreamParameters(
            starting_page=self.starting_page,
            page_size=self.page_size,
            limit_num_pages=self.limit_num_pages,
        )

    @classmethod
    def from_json(cls, path: str | Path, **overrides: Any) -> "SyncSettings":
        """Load settings from a JSON config file.

        Args:
            path: Path to the JSON config file
            **overrides: Values that take precedence over the file

        Returns:
            SyncSettings instance with validated configuration
        """
        config_path = Path(path)
        data: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
