"""
Property-based tests for gallery provider inserts, deletes and notification batching.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from gallery_provider.core import parse_id
from gallery_provider.services import BatchOperation
from tests.gallery_strategies import (
    CHOSEN_PHOTOS_URI,
    METADATA_CACHE_URI,
    datetime_strategy,
    location_strategy,
    make_provider,
    photo_uri_list_strategy,
    photo_uri_strategy,
)


@given(uris=photo_uri_list_strategy)
@settings(max_examples=50, deadline=None)
def test_returned_ids_strictly_increase(uris: list[str]):
    """Every insert returns a larger id than any earlier insert, duplicates included."""
    provider, _ = make_provider()
    try:
        ids = [parse_id(provider.insert(CHOSEN_PHOTOS_URI, {"uri": uri})) for uri in uris]
        assert all(a < b for a, b in zip(ids, ids[1:]))
    finally:
        provider.close()


@given(uris=photo_uri_list_strategy)
@settings(max_examples=50, deadline=None)
def test_one_row_per_distinct_uri(uris: list[str]):
    """Inserting a uri that already exists replaces the old row."""
    provider, _ = make_provider()
    try:
        last_id = {}
        for uri in uris:
            last_id[uri] = parse_id(provider.insert(CHOSEN_PHOTOS_URI, {"uri": uri}))

        rows = provider.query(CHOSEN_PHOTOS_URI).fetchall()
        assert {row["uri"]: row["_id"] for row in rows} == last_id
        assert len(rows) == len(set(uris))
    finally:
        provider.close()


@given(uris=photo_uri_list_strategy)
@settings(max_examples=50, deadline=None)
def test_unbatched_inserts_notify_every_time(uris: list[str]):
    provider, transport = make_provider()
    try:
        returned = [provider.insert(CHOSEN_PHOTOS_URI, {"uri": uri}) for uri in uris]
        assert transport.published == returned
    finally:
        provider.close()


@given(uris=photo_uri_list_strategy)
@settings(max_examples=50, deadline=None)
def test_batched_inserts_notify_once_per_distinct_uri(uris: list[str]):
    """N inserts over K distinct uris in one batch publish K notifications afterwards."""
    provider, transport = make_provider()
    try:
        provider.apply_batch(
            [BatchOperation.insert(CHOSEN_PHOTOS_URI, {"uri": uri}) for uri in uris]
        )

        published = transport.published_strings()
        assert len(published) == len(set(uris))
        assert len(set(published)) == len(published)

        rows = provider.query(CHOSEN_PHOTOS_URI).fetchall()
        assert sorted(published) == sorted(f"{CHOSEN_PHOTOS_URI}/{row['_id']}" for row in rows)
    finally:
        provider.close()


@given(uris=photo_uri_list_strategy, removed=photo_uri_strategy)
@settings(max_examples=50, deadline=None)
def test_delete_count_matches_removed_rows(uris: list[str], removed: str):
    provider, transport = make_provider()
    try:
        for uri in uris:
            provider.insert(CHOSEN_PHOTOS_URI, {"uri": uri})
        transport.clear()

        expected = 1 if removed in uris else 0
        assert provider.delete(CHOSEN_PHOTOS_URI, "uri = ?", [removed]) == expected
        assert len(transport.published) == expected

        remaining = [row["uri"] for row in provider.query(CHOSEN_PHOTOS_URI)]
        assert removed not in remaining
        assert len(remaining) == len(set(uris)) - expected
    finally:
        provider.close()


@given(
    entries=st.lists(
        st.tuples(photo_uri_strategy, datetime_strategy, location_strategy),
        min_size=1,
        max_size=15,
    )
)
@settings(max_examples=50, deadline=None)
def test_metadata_keeps_latest_values_per_uri(entries):
    provider, _ = make_provider()
    try:
        latest = {}
        for uri, taken, location in entries:
            provider.insert(
                METADATA_CACHE_URI, {"uri": uri, "datetime": taken, "location": location}
            )
            latest[uri] = (taken, location)

        rows = provider.query(METADATA_CACHE_URI).fetchall()
        assert {row["uri"]: (row["datetime"], row["location"]) for row in rows} == latest
    finally:
        provider.close()
