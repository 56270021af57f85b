"""
Service Layer - GalleryProvider, URI dispatch, table handlers, batches and ServicesContainer.
"""

from gallery_provider.services.batch import BatchOperation, BatchResult, OperationType
from gallery_provider.services.container import ServicesContainer, create_services
from gallery_provider.services.provider import GalleryProvider, ProviderContext
from gallery_provider.services.tables import TableHandler
from gallery_provider.services.uri_matcher import Match, UriMatcher, UriPattern

__all__ = [
    # Container and factory
    "ServicesContainer",
    "create_services",
    # Provider
    "GalleryProvider",
    "ProviderContext",
    "TableHandler",
    # Dispatch
    "Match",
    "UriMatcher",
    "UriPattern",
    # Batches
    "BatchOperation",
    "BatchResult",
    "OperationType",
]
