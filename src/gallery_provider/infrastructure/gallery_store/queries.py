"""
Low-level SQL statement builders for the gallery store.
"""

import logging
import sqlite3
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

from .models import InvalidArgumentError

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a column or table name for use in SQL."""
    return '"' + name.replace('"', '""') + '"'


def build_projection_map(columns: Iterable[str]) -> Mapping[str, str]:
    """Identity projection map over the given columns."""
    return MappingProxyType({column: column for column in columns})


class TableQueryBuilder:
    """
    Builds SELECT statements against a single table.

    Requested columns are resolved through the projection map; anything not
    in the map is rejected.
    """

    def __init__(self, table: str, projection_map: Mapping[str, str]):
        self._table = table
        self._projection_map = projection_map

    @property
    def table(self) -> str:
        return self._table

    def _resolve_projection(self, projection: Optional[Sequence[str]]) -> list[str]:
        if not projection:
            return [
                f"{quote_identifier(expr)} AS {quote_identifier(name)}"
                for name, expr in self._projection_map.items()
            ]
        resolved = []
        for column in projection:
            expr = self._projection_map.get(column)
            if expr is None:
                raise InvalidArgumentError(f"Invalid column {column}")
            resolved.append(f"{quote_identifier(expr)} AS {quote_identifier(column)}")
        return resolved

    def build_query(
        self,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> str:
        sql = f"SELECT {', '.join(self._resolve_projection(projection))} FROM {quote_identifier(self._table)}"
        if selection:
            sql += f" WHERE ({selection})"
        if sort_order:
            sql += f" ORDER BY {sort_order}"
        return sql

    def query(
        self,
        conn: sqlite3.Connection,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        sort_order: Optional[str] = None,
    ) -> sqlite3.Cursor:
        sql = self.build_query(projection, selection, sort_order)
        logger.debug(f"Query: {sql} args={selection_args}")
        return conn.execute(sql, tuple(selection_args or ()))


def insert_row(conn: sqlite3.Connection, table: str, values: Mapping[str, Any]) -> int:
    """
    Insert one row and return its row id.

    Returns -1 when the engine rejects the row; the error is logged rather
    than raised so callers can decide how to report the failure.
    """
    columns = list(values.keys())
    if columns:
        sql = (
            f"INSERT INTO {quote_identifier(table)} "
            f"({', '.join(quote_identifier(c) for c in columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
    else:
        sql = f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES"
    try:
        cursor = conn.execute(sql, tuple(values[c] for c in columns))
    except sqlite3.Error as e:
        logger.error(f"Error inserting {dict(values)} into {table}: {e}")
        return -1
    return cursor.lastrowid if cursor.lastrowid is not None else -1


def delete_rows(
    conn: sqlite3.Connection,
    table: str,
    selection: Optional[str] = None,
    selection_args: Optional[Sequence[Any]] = None,
) -> int:
    """Delete rows matching the selection (all rows if none). Returns the count."""
    where = f"({selection})" if selection else "1"
    cursor = conn.execute(
        f"DELETE FROM {quote_identifier(table)} WHERE {where}",
        tuple(selection_args or ()),
    )
    return cursor.rowcount


def count_rows(conn: sqlite3.Connection, table: str) -> int:
    row = conn.execute(f"SELECT COUNT(*) FROM {quote_identifier(table)}").fetchone()
    return row[0]


def find_row_id(conn: sqlite3.Connection, table: str, column: str, value: Any) -> Optional[int]:
    """Return the _id of the row whose ``column`` equals ``value``, if any."""
    row = conn.execute(
        f"SELECT _id FROM {quote_identifier(table)} WHERE {quote_identifier(column)} = ?",
        (value,),
    ).fetchone()
    return row[0] if row is not None else None
