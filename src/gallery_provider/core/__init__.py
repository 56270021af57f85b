"""
Core Layer - Configuration, contract constants and resource URI helpers.
"""

from gallery_provider.core.config import (
    DatabaseConfig,
    GalleryConfig,
    LoggingConfig,
    ProviderConfig,
    configure_logging,
    load_config,
)
from gallery_provider.core.contract import (
    COLUMN_ID,
    DEFAULT_AUTHORITY,
    ChosenPhotos,
    GalleryContract,
    MetadataCache,
    TableContract,
    build_contract,
)
from gallery_provider.core.uri import ResourceUri, parse_id, with_appended_id

__all__ = [
    # Config
    "GalleryConfig",
    "DatabaseConfig",
    "ProviderConfig",
    "LoggingConfig",
    "configure_logging",
    "load_config",
    # Contract
    "COLUMN_ID",
    "DEFAULT_AUTHORITY",
    "ChosenPhotos",
    "MetadataCache",
    "GalleryContract",
    "TableContract",
    "build_contract",
    # URIs
    "ResourceUri",
    "parse_id",
    "with_appended_id",
]
