from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.constants import DATA_CHANGE_EVENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """Signal that a collection was rewritten.

    `collection` is None for a full reload (e.g. another process wrote the store).
    """

    collection: Optional[str]
    origin: str
    name: str = DATA_CHANGE_EVENT


Handler = Callable[[ChangeEvent], None]


class ChangeBus:
    """In-process publish/subscribe channel shared by data contexts."""

    def __init__(self) -> None:
        self._handlers: dict[int, Handler] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        with self._lock:
            hid = next(self._ids)
            self._handlers[hid] = handler

        def unsubscribe() -> None:
            with self._lock:
                self._handlers.pop(hid, None)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            handlers = list(self._handlers.values())
        logger.debug("publish %s collection=%s to %d handler(s)", event.name, event.collection, len(handlers))
        for handler in handlers:
            handler(event)


@dataclass(frozen=True)
class FeedEntry:
    sequence: int
    table: str


class ChangeFeed:
    """Numbers change events per table for polling realtime clients."""

    def __init__(self, tables: tuple[str, ...], *, max_entries: int = 1000):
        self._tables = tables
        self._entries: list[FeedEntry] = []
        self._sequence = 0
        self._max_entries = max_entries
        self._lock = threading.Lock()

    def attach(self, source) -> Callable[[], None]:
        """Listen on a bus or a data context (anything with `subscribe`)."""
        return source.subscribe(self.record)

    @property
    def sequence(self) -> int:
        return self._sequence

    def record(self, event: ChangeEvent) -> None:
        tables = (event.collection,) if event.collection else self._tables
        with self._lock:
            for table in tables:
                self._sequence += 1
                self._entries.append(FeedEntry(self._sequence, table))
            del self._entries[: max(0, len(self._entries) - self._max_entries)]

    def changes_since(self, since: int) -> tuple[int, list[str]]:
        """Return (current sequence, tables changed after `since`).

        A client older than the retained window, or ahead of it after a
        server restart, gets every table.
        """
        with self._lock:
            current = self._sequence
            oldest = self._entries[0].sequence if self._entries else current + 1
            if since < oldest - 1 or since > current:
                return current, list(self._tables)
            changed = []
            for entry in self._entries:
                if entry.sequence > since and entry.table not in changed:
                    changed.append(entry.table)
        return current, changed
