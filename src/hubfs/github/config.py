"""ClientConfig — connection settings for the GitHub REST client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hubfs import __version__

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_API_URL = "https://api.github.com"


@dataclass
class ClientConfig:
    """Settings for :class:`~hubfs.github.client.GitHubClient`."""

    token: str | None = None
    """Personal access token.  ``None`` means anonymous access."""

    api_url: str = DEFAULT_API_URL
    """REST API base URL (GitHub Enterprise installs use their own)."""

    user_agent: str = f"hubfs/{__version__}"
    """Sent as the ``User-Agent`` header, which GitHub requires."""

    timeout: float = 30.0
    """Per-request timeout in seconds."""

    per_page: int = 100
    """Page size for paginated listings."""

    api_version: str = "2022-11-28"
    """Value of the ``X-GitHub-Api-Version`` header."""

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")
        if self.token is not None and not self.token.strip():
            self.token = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ``GITHUB_TOKEN`` and ``GITHUB_API_URL``."""
        env = os.environ if environ is None else environ
        return cls(
            token=env.get("GITHUB_TOKEN"),
            api_url=env.get("GITHUB_API_URL") or DEFAULT_API_URL,
        )

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.user_agent,
            "X-GitHub-Api-Version": self.api_version,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
