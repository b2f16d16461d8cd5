"""In-process event dispatching.

Handlers subscribe to one exact ``EventKind`` and are called synchronously,
in registration order. Events dispatched by a handler while a dispatch is in
progress are queued and delivered after the current event, before the
outermost ``dispatch`` call returns (breadth-first). The first handler
failure aborts the whole chain and is re-raised to the caller.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from bookclub.domain.events import DomainEvent, EventKind

logger = logging.getLogger(__name__)


@runtime_checkable
class EventHandler(Protocol):
    def handle(self, event: DomainEvent) -> None: ...


class EventDispatcher(ABC):
    """Interface for publishing domain events."""

    @abstractmethod
    def dispatch_all(self, events: Iterable[DomainEvent]) -> None:
        """Dispatch each event in order; abort on the first handler failure."""
        ...

    def dispatch(self, event: DomainEvent) -> None:
        self.dispatch_all([event])


class EventDispatcherWithSubscribers(EventDispatcher):
    def __init__(self) -> None:
        self._subscribers: dict[EventKind, list[EventHandler]] = {}
        self._queue: deque[DomainEvent] = deque()
        self._dispatching = False

    def subscribe(self, kind: EventKind, handler: EventHandler) -> None:
        if not isinstance(kind, EventKind):
            raise TypeError(f"Expected an EventKind, got {kind!r}")
        if not callable(getattr(handler, "handle", None)):
            raise TypeError(f"{handler!r} has no handle() method")

        self._subscribers.setdefault(kind, []).append(handler)

    def subscribers(self, kind: EventKind) -> tuple[EventHandler, ...]:
        return tuple(self._subscribers.get(kind, ()))

    def dispatch_all(self, events: Iterable[DomainEvent]) -> None:
        self._queue.extend(events)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                self._deliver(self._queue.popleft())
        except Exception:
            logger.error(
                "Event dispatch aborted, dropping %d queued event(s)", len(self._queue)
            )
            self._queue.clear()
            raise
        finally:
            self._dispatching = False

    def _deliver(self, event: DomainEvent) -> None:
        handlers = self.subscribers(event.kind)
        logger.debug("Dispatching %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler.handle(event)


class EventDispatcherSpy(EventDispatcher):
    """Records every event dispatched through it, then forwards it."""

    def __init__(self, inner: EventDispatcher) -> None:
        self._inner = inner
        self._dispatched_events: list[DomainEvent] = []

    def dispatch_all(self, events: Iterable[DomainEvent]) -> None:
        events = list(events)
        self._dispatched_events.extend(events)
        self._inner.dispatch_all(events)

    def dispatched_events(self) -> list[DomainEvent]:
        return list(self._dispatched_events)

    def clear_events(self) -> None:
        self._dispatched_events.clear()
