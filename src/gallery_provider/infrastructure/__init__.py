"""
Infrastructure Layer - SQLite gallery store, result cursors and change notification.
"""

from gallery_provider.infrastructure.cursor import ResultCursor
from gallery_provider.infrastructure.fakes import (
    RecordingNotificationTransport,
    RecordingObserver,
)
from gallery_provider.infrastructure.gallery_store import (
    DATABASE_NAME,
    DATABASE_VERSION,
    ChosenPhoto,
    DatabaseHelper,
    GalleryProviderError,
    GalleryStoreError,
    InvalidArgumentError,
    MetadataCacheEntry,
    OperationApplicationError,
    SchemaVersionError,
    UnsupportedOperationError,
    WriteFailureError,
)
from gallery_provider.infrastructure.notifications import (
    ChangeNotifier,
    ContentObserver,
    InMemoryNotificationTransport,
    NotificationTransport,
    NotifyMode,
    observer_from_callback,
)

__all__ = [
    # Gallery store
    "DatabaseHelper",
    "DATABASE_NAME",
    "DATABASE_VERSION",
    "ChosenPhoto",
    "MetadataCacheEntry",
    # Errors
    "GalleryProviderError",
    "GalleryStoreError",
    "InvalidArgumentError",
    "OperationApplicationError",
    "SchemaVersionError",
    "UnsupportedOperationError",
    "WriteFailureError",
    # Cursor
    "ResultCursor",
    # Notifications
    "ChangeNotifier",
    "ContentObserver",
    "NotificationTransport",
    "InMemoryNotificationTransport",
    "NotifyMode",
    "observer_from_callback",
    # Fakes for testing
    "RecordingNotificationTransport",
    "RecordingObserver",
]
