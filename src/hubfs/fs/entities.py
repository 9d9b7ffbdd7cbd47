"""Entity — the tagged union of everything a virtual path can name."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .types import FileInfo, OwnerKind, TreeEntryKind
from .utils import SEPARATOR, child_name, join_path

if TYPE_CHECKING:
    from .handle import DriveHandle
    from .types import TreeEntry


class EntityKind(Enum):
    """Variants of :class:`Entity`."""

    INVALID = "invalid"
    ROOT = "root"
    USER = "user"
    ORG = "org"
    REPO = "repo"
    FOLDER = "folder"
    FILE = "file"


OWNER_KINDS = frozenset({EntityKind.USER, EntityKind.ORG})
ENTRY_KINDS = frozenset({EntityKind.FOLDER, EntityKind.FILE})


@dataclass(frozen=True, slots=True)
class Entity:
    """Immutable view of one remote object.

    Only the fields relevant to ``kind`` are set:

    - ROOT: nothing.
    - USER / ORG: ``name`` is the account login.
    - REPO: ``owner`` and ``name``.
    - FOLDER / FILE: ``owner``, ``repo``, ``file_path`` and ``sha``;
      ``name`` is the last segment of ``file_path``.

    A changed remote object is represented by a new instance, never by
    mutating ``sha`` in place.
    """

    kind: EntityKind
    name: str = ""
    owner: str | None = None
    repo: str | None = None
    file_path: str | None = None
    sha: str | None = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def root(cls) -> Entity:
        return cls(EntityKind.ROOT)

    @classmethod
    def account(cls, kind: OwnerKind, login: str) -> Entity:
        """USER or ORG entity for *login*."""
        entity_kind = EntityKind.ORG if kind is OwnerKind.ORG else EntityKind.USER
        return cls(entity_kind, name=login)

    @classmethod
    def repository(cls, owner: str, name: str) -> Entity:
        return cls(EntityKind.REPO, name=name, owner=owner)

    @classmethod
    def folder(cls, owner: str, repo: str, file_path: str, sha: str | None) -> Entity:
        return cls(
            EntityKind.FOLDER,
            name=child_name(file_path),
            owner=owner,
            repo=repo,
            file_path=file_path,
            sha=sha,
        )

    @classmethod
    def file(cls, owner: str, repo: str, file_path: str, sha: str | None) -> Entity:
        return cls(
            EntityKind.FILE,
            name=child_name(file_path),
            owner=owner,
            repo=repo,
            file_path=file_path,
            sha=sha,
        )

    @classmethod
    def from_tree_entry(
        cls, owner: str, repo: str, file_path: str, entry: TreeEntry
    ) -> Entity | None:
        """FOLDER for trees, FILE for blobs, ``None`` for anything else."""
        if entry.kind is TreeEntryKind.TREE:
            return cls.folder(owner, repo, file_path, entry.sha)
        if entry.kind is TreeEntryKind.BLOB:
            return cls.file(owner, repo, file_path, entry.sha)
        return None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def virtual_path(self) -> str:
        """Slash-joined identity, unique within the cache."""
        if self.kind is EntityKind.ROOT:
            return ""
        if self.kind is EntityKind.REPO:
            return join_path(self.owner or "", self.name)
        if self.kind in ENTRY_KINDS:
            return join_path(self.owner or "", self.repo or "", self.file_path or "")
        return self.name

    @property
    def owner_kind(self) -> OwnerKind | None:
        """OwnerKind for USER and ORG entities, ``None`` otherwise."""
        if self.kind is EntityKind.ORG:
            return OwnerKind.ORG
        if self.kind is EntityKind.USER:
            return OwnerKind.USER
        return None

    @property
    def is_container(self) -> bool:
        return self.kind not in (EntityKind.FILE, EntityKind.INVALID)

    # ------------------------------------------------------------------
    # Operations (dispatched per kind)
    # ------------------------------------------------------------------

    async def children(self, handle: DriveHandle) -> list[Entity]:
        """Direct children, fetched from the remote and cached."""
        from .listing import operations_for

        return await operations_for(self.kind).children(self, handle)

    async def exists(self, handle: DriveHandle) -> bool:
        """Ask the remote whether this object is still there."""
        from .listing import operations_for

        return await operations_for(self.kind).exists(self, handle)

    def to_info(self) -> FileInfo:
        """Display record: files as files, everything else as directories."""
        return FileInfo(
            path=self.virtual_path or SEPARATOR,
            name=self.name,
            is_directory=self.is_container,
            kind=self.kind.value,
            sha=self.sha,
        )
