"""
Contract constants for the gallery provider.

Table names, column names, content types and default sort orders shared by
the provider and its clients. Content URIs depend on the authority, so they
are produced by :func:`build_contract` rather than being module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from gallery_provider.core.uri import ResourceUri

DEFAULT_AUTHORITY = "com.google.android.apps.muzei.gallery"

# Primary key column shared by every table
COLUMN_ID = "_id"


@dataclass(frozen=True)
class TableContract:
    """Static description of one provider table."""

    table_name: str
    content_uri: ResourceUri
    content_type: str
    columns: tuple[str, ...]
    required_column: str
    default_sort_order: str


class ChosenPhotos:
    """Column names for the chosen photos table."""

    TABLE_NAME = "chosen_photos"
    COLUMN_NAME_URI = "uri"
    COLUMNS = (COLUMN_ID, COLUMN_NAME_URI)
    DEFAULT_SORT_ORDER = f"{COLUMN_ID} ASC"


class MetadataCache:
    """Column names for the metadata cache table."""

    TABLE_NAME = "metadata_cache"
    COLUMN_NAME_URI = "uri"
    # Milliseconds since the epoch
    COLUMN_NAME_DATETIME = "datetime"
    COLUMN_NAME_LOCATION = "location"
    COLUMNS = (COLUMN_ID, COLUMN_NAME_URI, COLUMN_NAME_DATETIME, COLUMN_NAME_LOCATION)
    DEFAULT_SORT_ORDER = f"{COLUMN_ID} ASC"


@dataclass(frozen=True)
class GalleryContract:
    """Authority-bound contract for both tables."""

    authority: str
    chosen_photos: TableContract
    metadata_cache: TableContract


def _table_contract(authority: str, table_name: str, columns: tuple[str, ...],
                    required_column: str, default_sort_order: str) -> TableContract:
    return TableContract(
        table_name=table_name,
        content_uri=ResourceUri.build(authority, table_name),
        content_type=f"vnd.android.cursor.dir/vnd.{authority}.{table_name}",
        columns=columns,
        required_column=required_column,
        default_sort_order=default_sort_order,
    )


def build_contract(authority: str = DEFAULT_AUTHORITY) -> GalleryContract:
    """Build the contract for the given authority."""
    return GalleryContract(
        authority=authority,
        chosen_photos=_table_contract(
            authority,
            ChosenPhotos.TABLE_NAME,
            ChosenPhotos.COLUMNS,
            ChosenPhotos.COLUMN_NAME_URI,
            ChosenPhotos.DEFAULT_SORT_ORDER,
        ),
        metadata_cache=_table_contract(
            authority,
            MetadataCache.TABLE_NAME,
            MetadataCache.COLUMNS,
            MetadataCache.COLUMN_NAME_URI,
            MetadataCache.DEFAULT_SORT_ORDER,
        ),
    )
