"""Path resolution — turn a virtual path into a confirmed entity.

Segment count picks the strategy::

    0  -> root
    1  -> owner (organization first, then user)
    2  -> repository
    3+ -> folder or file in the default branch's tree

Every positive result is cached under its virtual path before it is
returned, and an exact cache hit skips the remote entirely.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .entities import Entity
from .exceptions import PathNotFoundError
from .listing import find_tree_entry
from .types import OwnerKind
from .utils import SEPARATOR, parse_path

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from .handle import DriveHandle
    from .types import Account

logger = logging.getLogger(__name__)


class OwnerClass(Enum):
    """Outcome of classifying a single-segment path."""

    ORG = "org"
    USER = "user"
    NEITHER = "neither"


def classify_owner(org: Account | None, user: Account | None) -> OwnerClass:
    """Decide what a single path segment names from the two lookups.

    An organization wins over a user with the same login.
    """
    if org is not None:
        return OwnerClass.ORG
    if user is not None:
        return OwnerClass.USER
    return OwnerClass.NEITHER


async def _absent_as_none(awaitable: Awaitable[Account]) -> Account | None:
    try:
        return await awaitable
    except PathNotFoundError:
        return None


async def probe_owner(handle: DriveHandle, name: str) -> OwnerClass:
    """Look *name* up as an organization, then as a user."""
    org = await _absent_as_none(handle.client.get_org(name))
    user = None if org is not None else await _absent_as_none(handle.client.get_user(name))
    return classify_owner(org, user)


# =============================================================================
# Resolution
# =============================================================================


async def resolve(handle: DriveHandle, path: str) -> Entity:
    """Resolve *path* to an entity.

    Raises ``PathNotFoundError`` when the path is invalid or names
    nothing on the remote.  Other remote errors propagate unchanged.
    """
    sections = parse_path(path)
    if sections is None:
        raise PathNotFoundError(f"Invalid path: {path!r}")

    key = SEPARATOR.join(sections)
    cached = handle.cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %r", key)
        return cached

    logger.debug("Resolving %r (%d segments)", key, len(sections))
    if not sections:
        entity = Entity.root()
    elif len(sections) == 1:
        entity = await _resolve_owner(handle, sections[0])
    elif len(sections) == 2:
        entity = await _resolve_repo(handle, sections[0], sections[1])
    else:
        entity = await _resolve_entry(handle, sections[0], sections[1], sections[2:])

    return handle.cache.put(entity)


async def lookup(handle: DriveHandle, path: str) -> Entity | None:
    """Like :func:`resolve` but returns ``None`` instead of raising NotFound."""
    try:
        return await resolve(handle, path)
    except PathNotFoundError:
        return None


async def _resolve_owner(handle: DriveHandle, name: str) -> Entity:
    outcome = await probe_owner(handle, name)
    if outcome is OwnerClass.ORG:
        return Entity.account(OwnerKind.ORG, name)
    if outcome is OwnerClass.USER:
        return Entity.account(OwnerKind.USER, name)
    raise PathNotFoundError(f"No user or organization named {name!r}")


async def _resolve_repo(handle: DriveHandle, owner: str, name: str) -> Entity:
    await handle.client.get_repo(owner, name)
    return Entity.repository(owner, name)


async def _resolve_entry(
    handle: DriveHandle, owner: str, repo: str, rest: list[str]
) -> Entity:
    file_path = SEPARATOR.join(rest)
    entry = await find_tree_entry(handle, owner, repo, file_path)
    entity = None
    if entry is not None:
        entity = Entity.from_tree_entry(owner, repo, file_path, entry)
    if entity is None:
        raise PathNotFoundError(f"Path not found: {owner}/{repo}/{file_path}")
    return entity
