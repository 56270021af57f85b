"""
Gallery provider.

Exposes the chosen photos and metadata cache tables through URI-addressed
insert, query, delete and batch operations, and tells observers when the
data behind a URI changes.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from gallery_provider.core.contract import DEFAULT_AUTHORITY, GalleryContract, build_contract
from gallery_provider.core.uri import ResourceUri
from gallery_provider.infrastructure.cursor import ResultCursor
from gallery_provider.infrastructure.gallery_store import (
    DATABASE_VERSION,
    DatabaseHelper,
    InvalidArgumentError,
)
from gallery_provider.infrastructure.notifications import ChangeNotifier, NotificationTransport
from gallery_provider.services.batch import BatchOperation, BatchResult
from gallery_provider.services.tables import TableHandler
from gallery_provider.services.uri_matcher import Match, UriMatcher

logger = logging.getLogger(__name__)


@dataclass
class ProviderContext:
    """Host environment the provider runs in."""

    transport: NotificationTransport


class GalleryProvider:
    """
    URI-routed access to the gallery tables.

    Supported URIs are ``content://<authority>/chosen_photos`` (insert,
    query, delete) and ``content://<authority>/metadata_cache`` (insert,
    query). Updates are never allowed. Anything else is an unknown URI.

    Without a context, queries return None and notifications are dropped.
    """

    def __init__(
        self,
        db_path: Path | str,
        context: Optional[ProviderContext] = None,
        authority: str = DEFAULT_AUTHORITY,
        version: int = DATABASE_VERSION,
        matcher: Optional[UriMatcher] = None,
    ):
        self._context = context
        self._contract = build_contract(authority)
        self._matcher = matcher or UriMatcher.for_contract(self._contract)
        self._helper = DatabaseHelper(db_path, version)
        self._notifier = ChangeNotifier(self._get_transport)
        self._handlers: dict[Match, TableHandler] = {
            Match.CHOSEN_PHOTOS: TableHandler(
                self._contract.chosen_photos, self._helper, self._notifier, deletable=True
            ),
            Match.METADATA_CACHE: TableHandler(
                self._contract.metadata_cache, self._helper, self._notifier, deletable=False
            ),
        }

    @property
    def contract(self) -> GalleryContract:
        return self._contract

    @property
    def context(self) -> Optional[ProviderContext]:
        return self._context

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def database(self) -> DatabaseHelper:
        return self._helper

    def _get_transport(self) -> Optional[NotificationTransport]:
        return self._context.transport if self._context is not None else None

    def _resolve(self, uri: ResourceUri | str) -> tuple[ResourceUri, TableHandler]:
        parsed = ResourceUri.parse(uri)
        handler = self._handlers.get(self._matcher.match(parsed))
        if handler is None:
            raise InvalidArgumentError(f"Unknown URI {uri}")
        return parsed, handler

    def get_type(self, uri: ResourceUri | str) -> str:
        """Return the content type for a table URI."""
        _, handler = self._resolve(uri)
        return handler.contract.content_type

    def insert(self, uri: ResourceUri | str, values: Optional[Mapping[str, Any]]) -> ResourceUri:
        """Insert a row and return the URI of the new row."""
        parsed, handler = self._resolve(uri)
        return handler.insert(parsed, values)

    def query(
        self,
        uri: ResourceUri | str,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        sort_order: Optional[str] = None,
    ) -> Optional[ResultCursor]:
        """
        Query a table.

        Returns:
            A cursor watching ``uri`` for changes, or None without a context.
        """
        parsed, handler = self._resolve(uri)
        transport = self._get_transport()
        if transport is None:
            return None
        return handler.query(parsed, transport, projection, selection, selection_args, sort_order)

    def delete(
        self,
        uri: ResourceUri | str,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
    ) -> int:
        """Delete matching rows and return how many were removed."""
        parsed, handler = self._resolve(uri)
        return handler.delete(parsed, selection, selection_args)

    def update(
        self,
        uri: ResourceUri | str,
        values: Optional[Mapping[str, Any]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
    ) -> int:
        _, handler = self._resolve(uri)
        return handler.update(values, selection, selection_args)

    def apply_batch(self, operations: Sequence[BatchOperation]) -> list[BatchResult]:
        """
        Apply operations in order as one transaction.

        Change notifications are held while the batch runs and published
        once per distinct URI afterwards, whether or not the batch succeeded.
        """
        logger.debug(f"Applying batch of {len(operations)} operation(s)")
        with self._notifier.held():
            with self._helper.transaction():
                results: list[BatchResult] = []
                for index, operation in enumerate(operations):
                    results.append(operation.apply(self, results, index))
                return results

    def close(self) -> None:
        self._helper.close()
