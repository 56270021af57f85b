"""
Gallery store module.

SQLite-based storage for chosen photos and the photo metadata cache.
"""

from .database import DatabaseHelper
from .models import (
    ChosenPhoto,
    GalleryProviderError,
    GalleryStoreError,
    InvalidArgumentError,
    MetadataCacheEntry,
    OperationApplicationError,
    SchemaVersionError,
    UnsupportedOperationError,
    WriteFailureError,
)
from .queries import (
    TableQueryBuilder,
    build_projection_map,
    count_rows,
    delete_rows,
    find_row_id,
    insert_row,
)
from .schema import (
    DATABASE_NAME,
    DATABASE_VERSION,
    get_user_version,
    initialize_schema,
    upgrade_schema,
)

__all__ = [
    # Helper
    "DatabaseHelper",
    # Models
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
    # Queries
    "TableQueryBuilder",
    "build_projection_map",
    "count_rows",
    "delete_rows",
    "find_row_id",
    "insert_row",
    # Schema
    "DATABASE_NAME",
    "DATABASE_VERSION",
    "get_user_version",
    "initialize_schema",
    "upgrade_schema",
]
