"""EntityCache — process-lifetime map from virtual path to entity."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import Entity

logger = logging.getLogger(__name__)


class EntityCache:
    """Thread-safe insert-or-replace cache keyed by virtual path.

    Entries never expire; only :meth:`remove` and :meth:`clear` drop them.
    The lock is internal, callers never hold it across an await.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entity] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Entity | None:
        """Return the cached entity for *path*, or ``None``."""
        with self._lock:
            return self._entries.get(path)

    def put(self, entity: Entity) -> Entity:
        """Insert or replace *entity* under its virtual path."""
        with self._lock:
            self._entries[entity.virtual_path] = entity
        return entity

    def put_all(self, entities: list[Entity]) -> list[Entity]:
        """Insert or replace every entity in *entities*."""
        with self._lock:
            for entity in entities:
                self._entries[entity.virtual_path] = entity
        return entities

    def remove(self, path: str) -> bool:
        """Drop the entry for *path*. Return True if one was present."""
        with self._lock:
            removed = self._entries.pop(path, None) is not None
        if removed:
            logger.debug("Invalidated cache entry %r", path)
        return removed

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Snapshot of the cached paths."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
