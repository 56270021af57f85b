"""
Tests for the notification transport and ChangeNotifier.
"""

import pytest

from gallery_provider.core import ResourceUri
from gallery_provider.infrastructure import (
    ChangeNotifier,
    InMemoryNotificationTransport,
    NotifyMode,
    RecordingNotificationTransport,
    RecordingObserver,
)

TABLE = "content://gallery/chosen_photos"
ROW = "content://gallery/chosen_photos/3"
OTHER_TABLE = "content://gallery/metadata_cache"


@pytest.fixture
def transport() -> RecordingNotificationTransport:
    return RecordingNotificationTransport()


@pytest.fixture
def notifier(transport) -> ChangeNotifier:
    return ChangeNotifier(lambda: transport)


class TestTransportMatching:
    @pytest.mark.parametrize(
        "registered, changed, descendants, expected",
        [
            (TABLE, TABLE, False, True),
            (ROW, TABLE, False, True),
            (TABLE, ROW, True, True),
            (TABLE, ROW, False, False),
            (TABLE, OTHER_TABLE, True, False),
            ("content://gallery", ROW, True, True),
            (TABLE, "content://other/chosen_photos/3", True, False),
        ],
    )
    def test_matching_rules(self, registered, changed, descendants, expected):
        transport = InMemoryNotificationTransport()
        observer = RecordingObserver()
        transport.register_observer(registered, observer, notify_for_descendants=descendants)

        transport.notify_change(changed)

        assert (observer.changes == [ResourceUri.parse(changed)]) is expected

    def test_unregister_removes_all_registrations(self):
        transport = InMemoryNotificationTransport()
        observer = RecordingObserver()
        transport.register_observer(TABLE, observer)
        transport.register_observer(OTHER_TABLE, observer)
        assert transport.observer_count() == 2

        transport.unregister_observer(observer)
        transport.notify_change(TABLE)

        assert transport.observer_count() == 0
        assert observer.changes == []


class TestImmediateMode:
    def test_publishes_each_notify(self, notifier, transport):
        notifier.notify(ROW)
        notifier.notify(ROW)
        assert transport.published_strings() == [ROW, ROW]
        assert notifier.mode is NotifyMode.IMMEDIATE

    def test_drops_without_transport(self):
        notifier = ChangeNotifier(lambda: None)
        notifier.notify(ROW)
        assert notifier.pending() == []


class TestHeldMode:
    def test_collects_distinct_uris_in_first_seen_order(self, notifier, transport):
        with notifier.held():
            for uri in [ROW, TABLE, ROW, OTHER_TABLE, TABLE]:
                notifier.notify(uri)
            assert notifier.mode is NotifyMode.HELD
            assert transport.published == []

        assert transport.published_strings() == [ROW, TABLE, OTHER_TABLE]
        assert notifier.mode is NotifyMode.IMMEDIATE

    def test_release_returns_published_count(self, notifier):
        notifier.hold()
        notifier.notify(ROW)
        notifier.notify(TABLE)
        assert notifier.release() == 2
        assert notifier.release() == 0

    def test_superseded_row_is_dropped(self, notifier, transport):
        with notifier.held():
            notifier.notify(f"{TABLE}/1")
            notifier.notify(f"{TABLE}/2")
            notifier.notify(f"{TABLE}/3", supersedes=f"{TABLE}/1")

        assert transport.published_strings() == [f"{TABLE}/2", f"{TABLE}/3"]

    def test_supersedes_is_ignored_when_immediate(self, notifier, transport):
        notifier.notify(f"{TABLE}/1")
        notifier.notify(f"{TABLE}/2", supersedes=f"{TABLE}/1")
        assert transport.published_strings() == [f"{TABLE}/1", f"{TABLE}/2"]

    def test_hold_discards_stale_pending(self, notifier, transport):
        notifier.hold()
        notifier.notify(ROW)
        notifier.hold()
        notifier.release()
        assert transport.published == []

    def test_release_happens_when_block_raises(self, notifier, transport):
        with pytest.raises(RuntimeError):
            with notifier.held():
                notifier.notify(ROW)
                raise RuntimeError("boom")

        assert transport.published_strings() == [ROW]
        assert notifier.mode is NotifyMode.IMMEDIATE

    def test_release_without_transport_clears_pending(self):
        notifier = ChangeNotifier(lambda: None)
        notifier.hold()
        notifier.notify(ROW)
        assert notifier.release() == 0
        assert notifier.pending() == []
        assert notifier.mode is NotifyMode.IMMEDIATE
