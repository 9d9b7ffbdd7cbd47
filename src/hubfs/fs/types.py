"""Remote data types and display records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OwnerKind(Enum):
    """Account kinds that own repositories."""

    USER = "user"
    ORG = "org"


class TreeEntryKind(Enum):
    """Object kinds found in a git tree listing."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


@dataclass(frozen=True, slots=True)
class Account:
    """A user or organization account."""

    login: str
    kind: OwnerKind


@dataclass(frozen=True, slots=True)
class RemoteRepo:
    """Repository metadata."""

    owner: str
    name: str
    default_branch: str = "main"


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """One entry of a tree listing.

    ``path`` is relative to the tree that was fetched, not to the
    repository root.
    """

    path: str
    kind: TreeEntryKind
    sha: str


@dataclass(frozen=True, slots=True)
class RemoteTree:
    """Result of a tree fetch."""

    sha: str
    entries: list[TreeEntry] = field(default_factory=list)
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class BlobContent:
    """Raw file content and the blob sha it was read at."""

    content: bytes
    sha: str


@dataclass
class FileInfo:
    """Display record for an entity."""

    path: str
    name: str
    is_directory: bool
    kind: str
    sha: str | None = None
