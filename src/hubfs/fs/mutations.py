"""Standalone orchestration functions for mutations.

Each function takes the session handle, checks existence through the
resolver, issues the remote call and then invalidates the changed entry
together with every enclosing folder up to its repository.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .entities import Entity, EntityKind
from .exceptions import AlreadyExistsError, PathNotFoundError, UnsupportedOperationError
from .listing import find_tree_entry
from .resolver import lookup, resolve
from .types import TreeEntryKind
from .utils import SEPARATOR, join_path, normalize_tree_path, parse_path

if TYPE_CHECKING:
    from .handle import DriveHandle
    from .types import BlobContent, RemoteRepo

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = ".gitkeep"
"""Marker file that forces an otherwise empty folder into the tree."""


def _split_entry_path(path: str) -> tuple[str, str, str]:
    """Return ``(owner, repo, file_path)`` for a path below a repository."""
    sections = parse_path(path)
    if sections is None:
        raise PathNotFoundError(f"Invalid path: {path!r}")
    if len(sections) <= 2:
        raise UnsupportedOperationError(f"Not a path inside a repository: {path!r}")
    return sections[0], sections[1], SEPARATOR.join(sections[2:])


def _invalidate_lineage(handle: DriveHandle, path: str) -> None:
    """Drop *path* and every ancestor up to and including its repository.

    Each enclosing tree gets a new sha when anything below it changes.
    """
    sections = path.split(SEPARATOR)
    for depth in range(len(sections), 1, -1):
        handle.cache.remove(SEPARATOR.join(sections[:depth]))
    logger.debug("Invalidated %s and its enclosing folders", path)


async def _require_repo(handle: DriveHandle, owner: str, repo: str) -> Entity:
    entity = await resolve(handle, join_path(owner, repo))
    if entity.kind is not EntityKind.REPO:
        raise PathNotFoundError(f"Repository not found: {owner}/{repo}")
    return entity


# =============================================================================
# Files
# =============================================================================


async def read_file(handle: DriveHandle, path: str) -> BlobContent:
    """Fetch the raw content of the file at *path*."""
    entity = await resolve(handle, path)
    if entity.kind is not EntityKind.FILE:
        raise UnsupportedOperationError(f"Not a file: {entity.virtual_path or SEPARATOR}")
    return await handle.client.get_blob_content(
        entity.owner or "", entity.repo or "", entity.file_path or ""
    )


async def create_file(
    handle: DriveHandle,
    path: str,
    content: bytes,
    message: str | None = None,
) -> Entity:
    """Create a new file; fail with ``AlreadyExistsError`` if it is there."""
    owner, repo, file_path = _split_entry_path(path)
    await _require_repo(handle, owner, repo)

    target = join_path(owner, repo, file_path)
    if await lookup(handle, target) is not None:
        raise AlreadyExistsError(f"Already exists: {target}")

    sha = await handle.client.create_file(
        owner, repo, file_path, message or f"Create {file_path}", content
    )
    _invalidate_lineage(handle, target)
    logger.debug("Created %s at %s", target, sha)
    return Entity.file(owner, repo, file_path, sha)


async def write_file(
    handle: DriveHandle,
    path: str,
    content: bytes,
    message: str | None = None,
) -> tuple[Entity, bool]:
    """Replace a file's content, creating the file when it is absent.

    Returns the new entity and whether it was created.
    """
    owner, repo, file_path = _split_entry_path(path)
    target = join_path(owner, repo, file_path)

    existing = await lookup(handle, target)
    if existing is None:
        return await create_file(handle, target, content, message), True
    if existing.kind is not EntityKind.FILE:
        raise UnsupportedOperationError(f"Cannot write content to a folder: {target}")

    assert existing.sha is not None
    sha = await handle.client.update_file(
        owner, repo, file_path, message or f"Update {file_path}", existing.sha, content
    )
    _invalidate_lineage(handle, target)
    logger.debug("Updated %s from %s to %s", target, existing.sha, sha)
    return Entity.file(owner, repo, file_path, sha), False


async def delete_entry(
    handle: DriveHandle,
    path: str,
    message: str | None = None,
) -> Entity:
    """Delete a file, a folder (every blob below it) or a repository."""
    entity = await resolve(handle, path)
    if entity.kind is EntityKind.REPO:
        return await delete_repo(handle, entity.virtual_path)
    if entity.kind is EntityKind.FILE:
        await _delete_blob(handle, entity, message)
        _invalidate_lineage(handle, entity.virtual_path)
        return entity
    if entity.kind is EntityKind.FOLDER:
        try:
            await _delete_folder(handle, entity, message)
        finally:
            _invalidate_lineage(handle, entity.virtual_path)
        return entity
    raise UnsupportedOperationError(
        f"Cannot delete {entity.kind.value}: {entity.virtual_path or SEPARATOR}"
    )


async def _delete_blob(handle: DriveHandle, entity: Entity, message: str | None) -> None:
    assert entity.sha is not None
    file_path = entity.file_path or ""
    await handle.client.delete_file(
        entity.owner or "",
        entity.repo or "",
        file_path,
        message or f"Delete {file_path}",
        entity.sha,
    )


async def _delete_folder(
    handle: DriveHandle, folder: Entity, message: str | None
) -> None:
    """Delete every blob below *folder*, dropping each from the cache as it goes."""
    owner, repo, prefix = folder.owner or "", folder.repo or "", folder.file_path or ""
    sha = folder.sha
    if sha is None:
        entry = await find_tree_entry(handle, owner, repo, prefix)
        if entry is None:
            raise PathNotFoundError(f"Folder not found: {folder.virtual_path}")
        sha = entry.sha

    tree = await handle.client.get_tree(owner, repo, sha, recursive=True)
    deleted = 0
    for entry in tree.entries:
        if entry.kind is not TreeEntryKind.BLOB:
            continue
        file_path = join_path(prefix, normalize_tree_path(entry.path))
        child = Entity.file(owner, repo, file_path, entry.sha)
        await _delete_blob(handle, child, message)
        _invalidate_lineage(handle, child.virtual_path)
        deleted += 1
    logger.debug("Deleted %d blobs below %s", deleted, folder.virtual_path)


# =============================================================================
# Directories and repositories
# =============================================================================


async def create_directory(
    handle: DriveHandle,
    path: str,
    message: str | None = None,
) -> Entity:
    """Create a repository (two segments) or a folder (three or more).

    Folders do not exist on their own in a git tree, so a placeholder
    file is written inside the new folder.
    """
    sections = parse_path(path)
    if sections is None:
        raise PathNotFoundError(f"Invalid path: {path!r}")
    if len(sections) < 2:
        raise UnsupportedOperationError(f"Cannot create a directory at {path!r}")
    if len(sections) == 2:
        return await _create_repo(handle, sections[0], sections[1])

    owner, repo = sections[0], sections[1]
    file_path = SEPARATOR.join(sections[2:])
    target = join_path(owner, repo, file_path)

    if await lookup(handle, join_path(owner, repo)) is None:
        raise UnsupportedOperationError(f"Not inside an existing repository: {target}")
    if await lookup(handle, target) is not None:
        raise AlreadyExistsError(f"Already exists: {target}")

    placeholder = join_path(file_path, PLACEHOLDER_NAME)
    await handle.client.create_file(
        owner, repo, placeholder, message or f"Create {file_path}", b""
    )
    _invalidate_lineage(handle, target)
    return await resolve(handle, target)


async def _create_repo(handle: DriveHandle, owner: str, name: str) -> Entity:
    target = join_path(owner, name)
    parent = await lookup(handle, owner)
    if parent is None or parent.owner_kind is None:
        raise UnsupportedOperationError(f"Not a user or organization: {owner!r}")
    if await lookup(handle, target) is not None:
        raise AlreadyExistsError(f"Already exists: {target}")

    created: RemoteRepo = await handle.client.create_repo(parent.owner_kind, owner, name)
    logger.debug("Created repository %s/%s", created.owner, created.name)
    return Entity.repository(owner, name)


async def delete_repo(handle: DriveHandle, path: str) -> Entity:
    """Delete the repository at *path*."""
    entity = await resolve(handle, path)
    if entity.kind is not EntityKind.REPO:
        raise UnsupportedOperationError(f"Not a repository: {entity.virtual_path or SEPARATOR}")

    await handle.client.delete_repo(entity.owner or "", entity.name)
    handle.cache.remove(entity.virtual_path)
    return entity
