"""Filesystem layer — entities, cache, resolution, enumeration, mutations."""

from hubfs.fs.cache import EntityCache
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
from hubfs.fs.handle import DriveHandle
from hubfs.fs.protocol import RemoteClient
from hubfs.fs.resolver import OwnerClass, classify_owner, lookup, resolve
from hubfs.fs.types import (
    Account,
    BlobContent,
    FileInfo,
    OwnerKind,
    RemoteRepo,
    RemoteTree,
    TreeEntry,
    TreeEntryKind,
)

__all__ = [
    "Account",
    "AlreadyExistsError",
    "AuthenticationError",
    "BlobContent",
    "ConflictError",
    "DriveHandle",
    "Entity",
    "EntityCache",
    "EntityKind",
    "FileInfo",
    "ForbiddenError",
    "HubError",
    "OwnerClass",
    "OwnerKind",
    "PathNotFoundError",
    "RemoteClient",
    "RemoteError",
    "RemoteRepo",
    "RemoteTree",
    "TooLargeError",
    "TreeEntry",
    "TreeEntryKind",
    "UnsupportedOperationError",
    "classify_owner",
    "lookup",
    "resolve",
]
