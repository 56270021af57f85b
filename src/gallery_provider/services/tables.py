"""
Per-table request handlers.

Both provider tables share one handler implementation. A handler is bound to
a table contract and decides which operations the table permits.
"""

import logging
import sqlite3
from typing import Any, Mapping, Optional, Sequence

from gallery_provider.core.contract import TableContract
from gallery_provider.core.uri import ResourceUri
from gallery_provider.infrastructure.cursor import ResultCursor
from gallery_provider.infrastructure.gallery_store import (
    DatabaseHelper,
    GalleryStoreError,
    InvalidArgumentError,
    TableQueryBuilder,
    UnsupportedOperationError,
    WriteFailureError,
    build_projection_map,
    delete_rows,
    find_row_id,
    insert_row,
)
from gallery_provider.infrastructure.notifications import ChangeNotifier, NotificationTransport

logger = logging.getLogger(__name__)


class TableHandler:
    """
    Insert, query and delete against a single table.

    Args:
        contract: Table name, columns, content URI and default sort order
        helper: Database helper owning the connection
        notifier: Where change notifications are sent
        deletable: Whether deletes are permitted on this table
    """

    def __init__(
        self,
        contract: TableContract,
        helper: DatabaseHelper,
        notifier: ChangeNotifier,
        *,
        deletable: bool,
    ):
        self._contract = contract
        self._helper = helper
        self._notifier = notifier
        self._deletable = deletable
        self._query_builder = TableQueryBuilder(
            contract.table_name, build_projection_map(contract.columns)
        )

    @property
    def contract(self) -> TableContract:
        return self._contract

    def insert(self, uri: ResourceUri, values: Optional[Mapping[str, Any]]) -> ResourceUri:
        if values is None:
            raise InvalidArgumentError("Invalid values: must not be None")
        if self._contract.required_column not in values:
            raise InvalidArgumentError(
                f"Initial values must contain {self._contract.required_column} {dict(values)}"
            )
        table = self._contract.table_name
        try:
            with self._helper.transaction() as conn:
                replaced_id = find_row_id(
                    conn, table, self._contract.required_column,
                    values[self._contract.required_column],
                )
                row_id = insert_row(conn, table, values)
                if row_id <= 0:
                    raise WriteFailureError(str(uri))
        except sqlite3.Error as e:
            raise GalleryStoreError(f"Failed to insert into {uri}: {e}") from e
        row_uri = self._contract.content_uri.with_appended_id(row_id)
        logger.debug(f"Inserted {row_uri}")
        replaced_uri = (
            self._contract.content_uri.with_appended_id(replaced_id)
            if replaced_id is not None else None
        )
        self._notifier.notify(row_uri, supersedes=replaced_uri)
        return row_uri

    def query(
        self,
        uri: ResourceUri,
        transport: NotificationTransport,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        sort_order: Optional[str] = None,
    ) -> ResultCursor:
        order_by = sort_order if sort_order else self._contract.default_sort_order
        try:
            with self._helper.reading() as conn:
                cursor = ResultCursor.from_sqlite(
                    self._query_builder.query(conn, projection, selection, selection_args, order_by)
                )
        except sqlite3.Error as e:
            raise GalleryStoreError(f"Failed to query {uri}: {e}") from e
        cursor.set_notification_uri(transport, uri)
        return cursor

    def delete(
        self,
        uri: ResourceUri,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
    ) -> int:
        if not self._deletable:
            raise UnsupportedOperationError("Deletes are not supported")
        try:
            with self._helper.transaction() as conn:
                count = delete_rows(conn, self._contract.table_name, selection, selection_args)
        except sqlite3.Error as e:
            raise GalleryStoreError(f"Failed to delete from {uri}: {e}") from e
        if count > 0:
            logger.debug(f"Deleted {count} row(s) from {uri}")
            self._notifier.notify(uri)
        return count

    def update(self, *args: Any, **kwargs: Any) -> int:
        raise UnsupportedOperationError("Updates are not allowed")
