"""
Fake implementations for testing.

Provides in-memory implementations of infrastructure interfaces
for use in unit and integration tests without a real host framework.
"""

from __future__ import annotations

from gallery_provider.core.uri import ResourceUri
from gallery_provider.infrastructure.notifications import (
    ContentObserver,
    InMemoryNotificationTransport,
)


class RecordingNotificationTransport(InMemoryNotificationTransport):
    """
    Notification transport that remembers every published change.

    Delivery to registered observers works as in the in-memory transport;
    ``published`` lists each changed URI in publication order.
    """

    def __init__(self) -> None:
        super().__init__()
        self.published: list[ResourceUri] = []

    def notify_change(self, uri: ResourceUri | str) -> None:
        self.published.append(ResourceUri.parse(uri))
        super().notify_change(uri)

    def published_strings(self) -> list[str]:
        return [str(uri) for uri in self.published]

    def clear(self) -> None:
        self.published.clear()


class RecordingObserver(ContentObserver):
    """Observer that collects the URIs it was told about."""

    def __init__(self) -> None:
        self.changes: list[ResourceUri] = []

    def on_change(self, uri: ResourceUri) -> None:
        self.changes.append(uri)
