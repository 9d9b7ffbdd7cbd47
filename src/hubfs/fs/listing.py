"""Child enumeration and existence probes, one table entry per entity kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .entities import Entity, EntityKind
from .exceptions import PathNotFoundError, TooLargeError
from .types import TreeEntryKind
from .utils import is_immediate_child, join_path, normalize_tree_path

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .handle import DriveHandle
    from .types import RemoteTree, TreeEntry

    ChildrenFn = Callable[[Entity, DriveHandle], Awaitable[list[Entity]]]
    ExistsFn = Callable[[Entity, DriveHandle], Awaitable[bool]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntityOperations:
    """Per-kind implementations behind ``Entity.children`` / ``Entity.exists``."""

    children: ChildrenFn
    exists: ExistsFn


# =============================================================================
# Tree helpers
# =============================================================================


def _check_truncated(tree: RemoteTree, virtual_path: str) -> None:
    if tree.truncated:
        raise TooLargeError(f"Tree listing too large to enumerate: {virtual_path}")


def _tree_children(
    parent: Entity,
    tree: RemoteTree,
    owner: str,
    repo: str,
    prefix: str,
    handle: DriveHandle,
) -> list[Entity]:
    """Turn a tree listing into the immediate children of *parent*.

    Entry paths are relative to the fetched tree, so they are re-rooted
    under *prefix* before filtering.  Anything deeper than one level
    (e.g. from a recursive listing) is dropped.
    """
    _check_truncated(tree, parent.virtual_path)

    items: list[Entity] = []
    for entry in tree.entries:
        file_path = join_path(prefix, normalize_tree_path(entry.path))
        child = Entity.from_tree_entry(owner, repo, file_path, entry)
        if child is None:
            continue
        if not is_immediate_child(parent.virtual_path, child.virtual_path):
            continue
        items.append(child)
    return handle.cache.put_all(items)


async def find_tree_entry(
    handle: DriveHandle, owner: str, repo: str, file_path: str
) -> TreeEntry | None:
    """Find *file_path* in the default branch's full tree.

    Returns ``None`` when the repository is empty or the path is absent.
    Raises ``TooLargeError`` when the path is absent from a truncated
    listing, since absence cannot be proven then.
    """
    head = await handle.client.get_default_branch_head_commit(owner, repo)
    if head is None:
        return None

    tree = await handle.client.get_tree(owner, repo, head, recursive=True)
    target = normalize_tree_path(file_path)
    for entry in tree.entries:
        if normalize_tree_path(entry.path) == target:
            return entry

    _check_truncated(tree, join_path(owner, repo, file_path))
    return None


async def _found(awaitable: Awaitable[object]) -> bool:
    try:
        await awaitable
    except PathNotFoundError:
        return False
    return True


# =============================================================================
# Children
# =============================================================================


async def _no_children(entity: Entity, handle: DriveHandle) -> list[Entity]:
    return []


async def _root_children(entity: Entity, handle: DriveHandle) -> list[Entity]:
    identity = await handle.client.current_identity()
    orgs = await handle.client.list_orgs()
    items = [Entity.account(org.kind, org.login) for org in orgs]
    items.append(Entity.account(identity.kind, identity.login))
    return handle.cache.put_all(items)


async def _owner_children(entity: Entity, handle: DriveHandle) -> list[Entity]:
    assert entity.owner_kind is not None
    repos = await handle.client.list_repos(entity.owner_kind, entity.name)
    items = [Entity.repository(entity.name, repo.name) for repo in repos]
    return handle.cache.put_all(items)


async def _repo_children(entity: Entity, handle: DriveHandle) -> list[Entity]:
    owner = entity.owner or ""
    head = await handle.client.get_default_branch_head_commit(owner, entity.name)
    if head is None:
        logger.debug("Repository %s has no commits", entity.virtual_path)
        return []

    tree = await handle.client.get_tree(owner, entity.name, head)
    return _tree_children(entity, tree, owner, entity.name, "", handle)


async def _folder_children(entity: Entity, handle: DriveHandle) -> list[Entity]:
    owner, repo, file_path = entity.owner or "", entity.repo or "", entity.file_path or ""
    sha = entity.sha
    if sha is None:
        entry = await find_tree_entry(handle, owner, repo, file_path)
        if entry is None or entry.kind is not TreeEntryKind.TREE:
            raise PathNotFoundError(f"Folder not found: {entity.virtual_path}")
        sha = entry.sha

    tree = await handle.client.get_tree(owner, repo, sha)
    return _tree_children(entity, tree, owner, repo, file_path, handle)


# =============================================================================
# Existence
# =============================================================================


async def _never(entity: Entity, handle: DriveHandle) -> bool:
    return False


async def _always(entity: Entity, handle: DriveHandle) -> bool:
    return True


async def _user_exists(entity: Entity, handle: DriveHandle) -> bool:
    return await _found(handle.client.get_user(entity.name))


async def _org_exists(entity: Entity, handle: DriveHandle) -> bool:
    return await _found(handle.client.get_org(entity.name))


async def _repo_exists(entity: Entity, handle: DriveHandle) -> bool:
    return await _found(handle.client.get_repo(entity.owner or "", entity.name))


async def _entry_exists(entity: Entity, handle: DriveHandle) -> bool:
    try:
        entry = await find_tree_entry(
            handle, entity.owner or "", entity.repo or "", entity.file_path or ""
        )
    except PathNotFoundError:
        return False
    if entry is None:
        return False
    expected = TreeEntryKind.TREE if entity.kind is EntityKind.FOLDER else TreeEntryKind.BLOB
    return entry.kind is expected


# =============================================================================
# Dispatch table
# =============================================================================

OPERATIONS: dict[EntityKind, EntityOperations] = {
    EntityKind.INVALID: EntityOperations(children=_no_children, exists=_never),
    EntityKind.ROOT: EntityOperations(children=_root_children, exists=_always),
    EntityKind.USER: EntityOperations(children=_owner_children, exists=_user_exists),
    EntityKind.ORG: EntityOperations(children=_owner_children, exists=_org_exists),
    EntityKind.REPO: EntityOperations(children=_repo_children, exists=_repo_exists),
    EntityKind.FOLDER: EntityOperations(children=_folder_children, exists=_entry_exists),
    EntityKind.FILE: EntityOperations(children=_no_children, exists=_entry_exists),
}


def operations_for(kind: EntityKind) -> EntityOperations:
    """Return the operation table entry for *kind*."""
    return OPERATIONS[kind]
