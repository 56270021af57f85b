"""
Query result cursor.

A ResultCursor holds the rows of one query and tracks whether the data
behind its notification URI has changed since the query ran.
"""

from __future__ import annotations

import sqlite3
import weakref
from collections.abc import Iterator
from typing import Optional

from gallery_provider.core.uri import ResourceUri
from gallery_provider.infrastructure.notifications import (
    ContentObserver,
    NotificationTransport,
)


class _StaleObserver(ContentObserver):
    def __init__(self, cursor: "ResultCursor"):
        self._cursor_ref = weakref.ref(cursor)

    def on_change(self, uri: ResourceUri) -> None:
        cursor = self._cursor_ref()
        if cursor is not None:
            cursor._mark_stale(uri)


class ResultCursor:
    """
    Rows returned by a provider query.

    Rows are read from the engine when the query runs, so a cursor is a
    snapshot: iterating it never sees later writes. Once a notification URI
    is set the cursor listens on the transport and flips ``is_stale`` on the
    next change; observers registered on the cursor are told as well.

    The transport only reaches the cursor through a weak reference. A cursor
    that is garbage collected without ``close()`` unregisters itself.
    """

    def __init__(self, columns: tuple[str, ...], rows: list[sqlite3.Row]):
        self._columns = columns
        self._rows = rows
        self._position = -1
        self._stale = False
        self._closed = False
        self._unregister: Optional[weakref.finalize] = None
        self._notification_uri: Optional[ResourceUri] = None
        self._self_observer = _StaleObserver(self)
        self._observers: list[ContentObserver] = []

    @classmethod
    def from_sqlite(cls, cursor: sqlite3.Cursor) -> "ResultCursor":
        columns = tuple(d[0] for d in cursor.description or ())
        return cls(columns, cursor.fetchall())

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def notification_uri(self) -> Optional[ResourceUri]:
        return self._notification_uri

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[sqlite3.Row]:
        return iter(self._rows)

    def __enter__(self) -> "ResultCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetchone(self) -> Optional[sqlite3.Row]:
        """Advance to the next row and return it, or None past the end."""
        if self._position + 1 >= len(self._rows):
            self._position = len(self._rows)
            return None
        self._position += 1
        return self._rows[self._position]

    def fetchall(self) -> list[sqlite3.Row]:
        return list(self._rows)

    def set_notification_uri(self, transport: NotificationTransport, uri: ResourceUri | str) -> None:
        """Watch ``uri`` (and its descendants) for changes."""
        if self._unregister is not None:
            self._unregister()
        self._notification_uri = ResourceUri.parse(uri)
        transport.register_observer(self._notification_uri, self._self_observer, True)
        self._unregister = weakref.finalize(
            self, transport.unregister_observer, self._self_observer
        )

    def register_content_observer(self, observer: ContentObserver) -> None:
        self._observers.append(observer)

    def unregister_content_observer(self, observer: ContentObserver) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    def _mark_stale(self, uri: ResourceUri) -> None:
        self._stale = True
        for observer in list(self._observers):
            observer.on_change(uri)

    def close(self) -> None:
        """Stop listening for changes and release the rows."""
        if self._closed:
            return
        if self._unregister is not None:
            self._unregister()
            self._unregister = None
        self._observers.clear()
        self._rows = []
        self._closed = True
