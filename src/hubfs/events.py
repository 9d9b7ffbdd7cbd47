"""EventBus and event types for mutation notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of successful mutations observers can subscribe to."""

    ENTRY_CREATED = "entry_created"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"
    REPO_CREATED = "repo_created"
    REPO_DELETED = "repo_deleted"


@dataclass(frozen=True, slots=True)
class EntryEvent:
    """Immutable record of a mutation.

    Attributes:
        event_type: The kind of mutation that occurred.
        path: Virtual path of the affected entity.
        sha: Blob or tree sha after the mutation, when known.
    """

    event_type: EventType
    path: str
    sha: str | None = None


@dataclass(frozen=True, slots=True)
class _Subscription:
    handler: Callable[..., Any]
    scope: str | None

    def covers(self, path: str) -> bool:
        if self.scope is None:
            return True
        return path == self.scope or path.startswith(self.scope + "/")


class EventBus:
    """Dispatches mutation events to registered handlers.

    A handler may be scoped to a virtual path, typically a repository
    such as ``"octo/widgets"``; it then only sees events for that path
    and everything below it.  Handlers are called sequentially in
    registration order.  Exceptions are logged but never propagated; a
    failing handler does not turn a successful remote mutation into an
    error.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[_Subscription]] = {et: [] for et in EventType}

    def register(
        self,
        event_type: EventType,
        handler: Callable[..., Any],
        *,
        scope: str | None = None,
    ) -> None:
        """Append *handler* to the list for *event_type*.

        With *scope*, the handler only receives events whose path is
        *scope* or lies below it.
        """
        if scope is not None:
            scope = scope.strip("/")
        self._handlers[event_type].append(_Subscription(handler, scope or None))

    def unregister(self, event_type: EventType, handler: Callable[..., Any]) -> bool:
        """Remove first occurrence of *handler*, whatever its scope. Return True if found."""
        subscriptions = self._handlers[event_type]
        for index, subscription in enumerate(subscriptions):
            if subscription.handler == handler:
                del subscriptions[index]
                return True
        return False

    async def emit(self, event: EntryEvent) -> None:
        """Dispatch *event* to the handlers for its type whose scope covers its path."""
        for subscription in self._handlers[event.event_type]:
            if not subscription.covers(event.path):
                continue
            try:
                await subscription.handler(event)
            except Exception:
                logger.warning(
                    "Handler %r failed for %s on %s",
                    subscription.handler,
                    event.event_type.value,
                    event.path,
                    exc_info=True,
                )

    @property
    def handler_count(self) -> int:
        """Total number of registered handlers across all event types."""
        return sum(len(s) for s in self._handlers.values())

    def clear(self) -> None:
        """Remove all registered handlers."""
        for subscriptions in self._handlers.values():
            subscriptions.clear()
