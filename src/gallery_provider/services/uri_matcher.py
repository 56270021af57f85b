"""
URI dispatch for the gallery provider.

Maps incoming resource URIs to the table they address. Patterns are plain
path templates where ``#`` matches a numeric segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gallery_provider.core.contract import GalleryContract
from gallery_provider.core.uri import ResourceUri


class Match(Enum):
    """Dispatch targets."""

    NO_MATCH = -1
    CHOSEN_PHOTOS = 1
    METADATA_CACHE = 2
    CHOSEN_PHOTO_ID = 3
    METADATA_CACHE_ID = 4


@dataclass(frozen=True)
class UriPattern:
    authority: str
    segments: tuple[str, ...]
    code: Match

    def matches(self, uri: ResourceUri) -> bool:
        if uri.authority != self.authority or len(uri.segments) != len(self.segments):
            return False
        for expected, actual in zip(self.segments, uri.segments):
            if expected == "#":
                if not actual.isdigit():
                    return False
            elif expected != actual:
                return False
        return True


class UriMatcher:
    """Immutable table of URI patterns."""

    def __init__(self, patterns: tuple[UriPattern, ...]):
        self._patterns = patterns

    @classmethod
    def for_contract(cls, contract: GalleryContract) -> "UriMatcher":
        chosen = contract.chosen_photos.table_name
        metadata = contract.metadata_cache.table_name
        return cls((
            UriPattern(contract.authority, (chosen,), Match.CHOSEN_PHOTOS),
            UriPattern(contract.authority, (chosen, "#"), Match.CHOSEN_PHOTO_ID),
            UriPattern(contract.authority, (metadata,), Match.METADATA_CACHE),
            UriPattern(contract.authority, (metadata, "#"), Match.METADATA_CACHE_ID),
        ))

    @property
    def patterns(self) -> tuple[UriPattern, ...]:
        return self._patterns

    def match(self, uri: ResourceUri | str) -> Match:
        parsed = ResourceUri.parse(uri)
        for pattern in self._patterns:
            if pattern.matches(parsed):
                return pattern.code
        return Match.NO_MATCH
