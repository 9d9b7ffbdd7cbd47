"""GitHub REST implementation of the remote client."""

from hubfs.github.client import GitHubClient
from hubfs.github.config import ClientConfig

__all__ = ["ClientConfig", "GitHubClient"]
