"""
Change notification for the gallery provider.

A NotificationTransport delivers "data behind this URI changed" events to
registered observers. The ChangeNotifier sits between the provider and the
transport and can hold notifications while a batch is being applied, so a
batch publishes each changed URI once, after it finishes.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from gallery_provider.core.uri import ResourceUri

logger = logging.getLogger(__name__)


class ContentObserver(ABC):
    """Receives change callbacks from a notification transport."""

    @abstractmethod
    def on_change(self, uri: ResourceUri) -> None:
        """Called when data behind ``uri`` changed."""
        ...


class NotificationTransport(ABC):
    """Abstract interface for publishing and subscribing to URI changes."""

    @abstractmethod
    def notify_change(self, uri: ResourceUri | str) -> None:
        """Publish a change for ``uri`` to every interested observer."""
        ...

    @abstractmethod
    def register_observer(
        self,
        uri: ResourceUri | str,
        observer: ContentObserver,
        notify_for_descendants: bool = True,
    ) -> None:
        """Register ``observer`` for changes to ``uri``."""
        ...

    @abstractmethod
    def unregister_observer(self, observer: ContentObserver) -> None:
        """Remove every registration of ``observer``."""
        ...


@dataclass(frozen=True)
class _Registration:
    uri: ResourceUri
    observer: ContentObserver
    notify_for_descendants: bool

    def matches(self, changed: ResourceUri) -> bool:
        if self.uri == changed or changed.is_ancestor_of(self.uri):
            return True
        return self.notify_for_descendants and self.uri.is_ancestor_of(changed)


class InMemoryNotificationTransport(NotificationTransport):
    """
    In-process notification transport.

    An observer registered at URI ``R`` hears about a change to ``C`` when
    ``C == R``, when ``C`` is an ancestor of ``R``, or when ``C`` is a
    descendant of ``R`` and the observer asked for descendant notifications.
    Observers are called synchronously on the publishing thread.
    """

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []
        # Reentrant: a collected cursor may unregister while the lock is held
        self._lock = threading.RLock()

    def register_observer(
        self,
        uri: ResourceUri | str,
        observer: ContentObserver,
        notify_for_descendants: bool = True,
    ) -> None:
        registration = _Registration(ResourceUri.parse(uri), observer, notify_for_descendants)
        with self._lock:
            self._registrations.append(registration)

    def unregister_observer(self, observer: ContentObserver) -> None:
        with self._lock:
            self._registrations = [r for r in self._registrations if r.observer is not observer]

    def observer_count(self) -> int:
        with self._lock:
            return len(self._registrations)

    def notify_change(self, uri: ResourceUri | str) -> None:
        changed = ResourceUri.parse(uri)
        with self._lock:
            targets = [r.observer for r in self._registrations if r.matches(changed)]
        logger.debug(f"Change on {changed}: {len(targets)} observer(s)")
        for observer in targets:
            observer.on_change(changed)


class _CallbackObserver(ContentObserver):
    def __init__(self, callback: Callable[[ResourceUri], None]):
        self._callback = callback

    def on_change(self, uri: ResourceUri) -> None:
        self._callback(uri)


def observer_from_callback(callback: Callable[[ResourceUri], None]) -> ContentObserver:
    """Wrap a plain callable as a ContentObserver."""
    return _CallbackObserver(callback)


class NotifyMode(Enum):
    """Publication modes of the ChangeNotifier."""

    IMMEDIATE = "immediate"
    HELD = "held"


class ChangeNotifier:
    """
    Publishes change notifications, optionally holding them during a batch.

    In IMMEDIATE mode every ``notify`` publishes straight away. In HELD mode
    URIs collect in an insertion-ordered set; ``release`` switches back to
    IMMEDIATE and publishes each collected URI once, in order.

    Writes from other threads during a batch are queued with it. Concurrent
    batches on one notifier are not supported.

    Attributes:
        transport_lookup: Returns the transport to publish on, or None when
            no transport is available (notifications are then dropped).
    """

    def __init__(self, transport_lookup: Callable[[], NotificationTransport | None]):
        self._transport_lookup = transport_lookup
        self._lock = threading.Lock()
        self._mode = NotifyMode.IMMEDIATE
        # dict keys keep first-insertion order and drop duplicates
        self._pending: dict[ResourceUri, None] = {}

    @property
    def mode(self) -> NotifyMode:
        return self._mode

    def pending(self) -> list[ResourceUri]:
        """URIs waiting for release, in publication order."""
        with self._lock:
            return list(self._pending)

    def notify(
        self, uri: ResourceUri | str, supersedes: ResourceUri | str | None = None
    ) -> None:
        """
        Publish a change for ``uri``, or queue it while held.

        While held, ``supersedes`` names a row that this write replaced; a
        pending notification for that row is dropped.
        """
        parsed = ResourceUri.parse(uri)
        with self._lock:
            if self._mode is NotifyMode.HELD:
                if supersedes is not None:
                    self._pending.pop(ResourceUri.parse(supersedes), None)
                self._pending[parsed] = None
                return
        transport = self._transport_lookup()
        if transport is None:
            return
        transport.notify_change(parsed)

    def hold(self) -> None:
        """Start holding notifications."""
        with self._lock:
            self._pending.clear()
            self._mode = NotifyMode.HELD

    def release(self) -> int:
        """
        Stop holding and publish every pending URI.

        Returns:
            Number of notifications published.
        """
        with self._lock:
            self._mode = NotifyMode.IMMEDIATE
            pending = list(self._pending)
            self._pending.clear()
        transport = self._transport_lookup()
        if transport is None:
            if pending:
                logger.debug(f"No transport available, dropping {len(pending)} notification(s)")
            return 0
        for uri in pending:
            transport.notify_change(uri)
        return len(pending)

    @contextmanager
    def held(self) -> Iterator["ChangeNotifier"]:
        """Hold notifications for the duration of the block."""
        self.hold()
        try:
            yield self
        finally:
            published = self.release()
            logger.debug(f"Released {published} held notification(s)")
