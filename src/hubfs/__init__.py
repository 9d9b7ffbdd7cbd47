"""hubfs: a code-hosting service's accounts, repositories and trees as a path namespace."""

__version__ = "0.1.0"

from hubfs._drive import HubDrive
from hubfs._drive_async import HubDriveAsync
from hubfs.content import ContentReader, ContentWriter
from hubfs.events import EntryEvent, EventBus, EventType
from hubfs.fs.entities import Entity, EntityKind
from hubfs.fs.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    HubError,
    PathNotFoundError,
    RemoteError,
    TooLargeError,
    UnsupportedOperationError,
)
from hubfs.fs.types import FileInfo, OwnerKind
from hubfs.github import ClientConfig, GitHubClient

__all__ = [
    "AlreadyExistsError",
    "AuthenticationError",
    "ClientConfig",
    "ConflictError",
    "ContentReader",
    "ContentWriter",
    "Entity",
    "EntityKind",
    "EntryEvent",
    "EventBus",
    "EventType",
    "FileInfo",
    "ForbiddenError",
    "GitHubClient",
    "HubDrive",
    "HubDriveAsync",
    "HubError",
    "OwnerKind",
    "PathNotFoundError",
    "RemoteError",
    "TooLargeError",
    "UnsupportedOperationError",
    "__version__",
]
