"""
Data models and errors for the gallery store.
"""

import sqlite3
from dataclasses import dataclass
from typing import Optional


class GalleryProviderError(Exception):
    """Base exception for gallery provider errors."""
    pass


class InvalidArgumentError(GalleryProviderError, ValueError):
    """Malformed request: unknown URI or missing required value."""
    pass


class UnsupportedOperationError(GalleryProviderError, NotImplementedError):
    """The table does not permit the requested operation."""
    pass


class WriteFailureError(GalleryProviderError):
    """An insert did not produce a valid row id."""

    def __init__(self, uri: str):
        super().__init__(f"Failed to insert row into {uri}")
        self.uri = uri


class OperationApplicationError(GalleryProviderError):
    """A batch operation could not be applied."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class GalleryStoreError(GalleryProviderError):
    """Wraps errors raised by the SQLite engine."""
    pass


class SchemaVersionError(GalleryStoreError):
    """The database file was written by a newer schema version."""
    pass


@dataclass
class ChosenPhoto:
    """One persisted user selection."""
    id: int
    uri: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ChosenPhoto":
        return cls(id=row["_id"], uri=row["uri"])


@dataclass
class MetadataCacheEntry:
    """Cached metadata for a photo."""
    id: int
    uri: str
    datetime: Optional[int] = None
    location: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "MetadataCacheEntry":
        return cls(
            id=row["_id"],
            uri=row["uri"],
            datetime=row["datetime"],
            location=row["location"],
        )
