"""DriveHandle — the per-session (client, cache) pair."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .cache import EntityCache

if TYPE_CHECKING:
    from .protocol import RemoteClient


@dataclass
class DriveHandle:
    """Everything the resolver, the enumerator and the mutations share.

    Built once per session and passed by reference; nothing in the core
    reads global state.
    """

    client: RemoteClient
    """Remote client implementing the ``RemoteClient`` protocol."""

    cache: EntityCache = field(default_factory=EntityCache)
    """Resolved entities keyed by virtual path."""
