"""HubDrive — synchronous host-integration facade."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any

from hubfs._drive_async import HubDriveAsync
from hubfs.content import ContentReader, ContentWriter
from hubfs.fs.exceptions import UnsupportedOperationError
from hubfs.fs.utils import make_path, parent_path

if TYPE_CHECKING:
    from types import TracebackType

    from hubfs.events import EventBus
    from hubfs.fs.entities import Entity
    from hubfs.fs.protocol import RemoteClient
    from hubfs.fs.types import Account, FileInfo
    from hubfs.github.config import ClientConfig

ITEM_TYPES = ("file", "directory")


class HubDrive:
    """Blocking API for hosts that cannot await.

    Runs :class:`HubDriveAsync` on a private event loop in a background
    thread.  This is the only place where sync callers meet the async
    core.

    Usage::

        with HubDrive() as drive:
            if drive.item_exists("octo/widgets"):
                names = drive.child_names("octo/widgets")
    """

    def __init__(
        self,
        client: RemoteClient | None = None,
        *,
        config: ClientConfig | None = None,
    ) -> None:
        self._closed = False
        self._drive = HubDriveAsync(client, config=config)

        # Private event loop in a daemon thread
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the remote client, stop the event loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._drive.close())
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)

    def __enter__(self) -> HubDrive:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def whoami(self) -> Account:
        """The authenticated account."""
        return self._run(self._drive.current_user())

    def resolve(self, path: str) -> Entity | None:
        """The entity at *path*, or ``None`` when nothing is there."""
        return self._run(self._drive.lookup(path))

    def item_exists(self, path: str) -> bool:
        return self._run(self._drive.exists(path))

    def is_container(self, path: str) -> bool:
        entity = self.resolve(path)
        return entity is not None and entity.is_container

    def has_children(self, path: str) -> bool:
        entity = self.resolve(path)
        if entity is None or not entity.is_container:
            return False
        return len(self._run(self._drive.children(path))) > 0

    def child_items(self, path: str, recurse: bool = False) -> list[FileInfo]:
        """Display records for the children (or all descendants) of *path*."""
        if self.resolve(path) is None:
            return []
        if recurse:
            entities = self._run(self._drive.walk(path))
        else:
            entities = self._run(self._drive.children(path))
        return [entity.to_info() for entity in entities]

    def child_names(self, path: str) -> list[str]:
        return [info.name for info in self.child_items(path)]

    def child_name(self, path: str) -> str | None:
        entity = self.resolve(path)
        return entity.name if entity is not None else None

    @staticmethod
    def parent_path(path: str, root: str = "") -> str | None:
        """Parent of *path*; ``None`` when *path* lies outside *root*."""
        if root and root not in path:
            return None
        return parent_path(path)

    @staticmethod
    def make_path(parent: str, child: str) -> str:
        return make_path(parent, child)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def read_bytes(self, path: str) -> bytes:
        return self._run(self._drive.read_file(path))

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return self.read_bytes(path).decode(encoding)

    def open_reader(
        self,
        path: str,
        *,
        encoding: str | None = "utf-8",
        delimiter: str | None = "\n",
    ) -> ContentReader:
        """Reader over the file's lines, or its bytes when *encoding* is None."""
        return ContentReader(self.read_bytes(path), encoding=encoding, delimiter=delimiter)

    def open_writer(self, path: str, message: str | None = None) -> ContentWriter:
        """Writer whose buffered content replaces the file on close."""
        return ContentWriter(lambda data: self.write(path, data, message))

    def write(self, path: str, content: str | bytes, message: str | None = None) -> FileInfo:
        entity = self._run(self._drive.write_file(path, content, message))
        return entity.to_info()

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def new_item(
        self,
        path: str,
        item_type: str = "file",
        content: str | bytes = b"",
        message: str | None = None,
    ) -> FileInfo:
        """Create a file or a directory (repository or folder) at *path*."""
        kind = item_type.lower()
        if kind == "file":
            entity = self._run(self._drive.create_file(path, content, message))
        elif kind == "directory":
            entity = self._run(self._drive.create_directory(path, message))
        else:
            raise UnsupportedOperationError(
                f"Unknown item type {item_type!r}; expected one of {', '.join(ITEM_TYPES)}"
            )
        return entity.to_info()

    def remove_item(self, path: str, message: str | None = None) -> FileInfo:
        entity = self._run(self._drive.delete_entry(path, message))
        return entity.to_info()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def drive(self) -> HubDriveAsync:
        """The underlying async drive (for advanced async use)."""
        return self._drive

    @property
    def events(self) -> EventBus:
        return self._drive.events
