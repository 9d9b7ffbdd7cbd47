"""HubDriveAsync — primary async class over one session handle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hubfs.events import EntryEvent, EventBus, EventType
from hubfs.fs import mutations
from hubfs.fs.cache import EntityCache
from hubfs.fs.entities import EntityKind
from hubfs.fs.exceptions import AuthenticationError, ForbiddenError
from hubfs.fs.handle import DriveHandle
from hubfs.fs.resolver import lookup, resolve
from hubfs.github.client import GitHubClient

if TYPE_CHECKING:
    from types import TracebackType

    from hubfs.fs.entities import Entity
    from hubfs.fs.protocol import RemoteClient
    from hubfs.fs.types import Account, FileInfo
    from hubfs.github.config import ClientConfig

logger = logging.getLogger(__name__)


def _as_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


class HubDriveAsync:
    """Async facade wiring the handle, resolver, mutations and event bus.

    Without an explicit *client* a :class:`GitHubClient` is built from
    *config* (or from the environment).

    Usage::

        async with HubDriveAsync() as drive:
            for entity in await drive.children("octo/widgets"):
                print(entity.virtual_path)
            await drive.write_file("octo/widgets/notes.md", "hello")
    """

    def __init__(
        self,
        client: RemoteClient | None = None,
        *,
        config: ClientConfig | None = None,
        cache: EntityCache | None = None,
    ) -> None:
        if client is not None and config is not None:
            raise ValueError("Provide client or config, not both")
        if client is None:
            client = GitHubClient(config)
        self._handle = DriveHandle(client=client, cache=cache or EntityCache())
        self._event_bus = EventBus()
        self._closed = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def handle(self) -> DriveHandle:
        return self._handle

    @property
    def cache(self) -> EntityCache:
        return self._handle.cache

    @property
    def events(self) -> EventBus:
        """Register handlers here to observe successful mutations."""
        return self._event_bus

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the remote client."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._handle.client.close()
        except Exception:
            logger.warning("Remote client close failed", exc_info=True)

    async def __aenter__(self) -> HubDriveAsync:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _emit(self, event_type: EventType, entity: Entity) -> None:
        await self._event_bus.emit(
            EntryEvent(event_type=event_type, path=entity.virtual_path, sha=entity.sha)
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def current_user(self) -> Account:
        """The account the client is authenticated as."""
        try:
            return await self._handle.client.current_identity()
        except AuthenticationError as err:
            raise AuthenticationError(
                f"Could not authenticate the current user ({err}). Is GITHUB_TOKEN set?"
            ) from err
        except ForbiddenError as err:
            raise ForbiddenError(
                f"Denied access to the current user ({err}). "
                "Does GITHUB_TOKEN allow reading user info?"
            ) from err

    async def resolve(self, path: str) -> Entity:
        return await resolve(self._handle, path)

    async def lookup(self, path: str) -> Entity | None:
        return await lookup(self._handle, path)

    async def exists(self, path: str) -> bool:
        return await lookup(self._handle, path) is not None

    async def children(self, path: str) -> list[Entity]:
        """Direct children of the entity at *path*."""
        entity = await resolve(self._handle, path)
        return await entity.children(self._handle)

    async def walk(self, path: str, max_depth: int | None = None) -> list[Entity]:
        """Every descendant of *path*, depth first, parents before children."""
        entity = await resolve(self._handle, path)
        found: list[Entity] = []
        await self._walk(entity, 1, max_depth, found)
        return found

    async def _walk(
        self, entity: Entity, depth: int, max_depth: int | None, found: list[Entity]
    ) -> None:
        for child in await entity.children(self._handle):
            found.append(child)
            if child.is_container and (max_depth is None or depth < max_depth):
                await self._walk(child, depth + 1, max_depth, found)

    async def list_dir(self, path: str) -> list[FileInfo]:
        """Display records for the direct children of *path*."""
        return [child.to_info() for child in await self.children(path)]

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def read_file(self, path: str) -> bytes:
        blob = await mutations.read_file(self._handle, path)
        return blob.content

    async def create_file(
        self, path: str, content: str | bytes, message: str | None = None
    ) -> Entity:
        entity = await mutations.create_file(self._handle, path, _as_bytes(content), message)
        await self._emit(EventType.ENTRY_CREATED, entity)
        return entity

    async def write_file(
        self, path: str, content: str | bytes, message: str | None = None
    ) -> Entity:
        entity, created = await mutations.write_file(
            self._handle, path, _as_bytes(content), message
        )
        await self._emit(EventType.ENTRY_CREATED if created else EventType.ENTRY_UPDATED, entity)
        return entity

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    async def create_directory(self, path: str, message: str | None = None) -> Entity:
        entity = await mutations.create_directory(self._handle, path, message)
        event_type = (
            EventType.REPO_CREATED if entity.kind is EntityKind.REPO else EventType.ENTRY_CREATED
        )
        await self._emit(event_type, entity)
        return entity

    async def delete_entry(self, path: str, message: str | None = None) -> Entity:
        entity = await mutations.delete_entry(self._handle, path, message)
        event_type = (
            EventType.REPO_DELETED if entity.kind is EntityKind.REPO else EventType.ENTRY_DELETED
        )
        await self._emit(event_type, entity)
        return entity

    async def delete_repo(self, path: str) -> Entity:
        entity = await mutations.delete_repo(self._handle, path)
        await self._emit(EventType.REPO_DELETED, entity)
        return entity
