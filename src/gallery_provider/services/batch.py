"""
Batch operations for the gallery provider.

A batch is a list of BatchOperation objects applied in order by
``GalleryProvider.apply_batch``. Later inserts can reference the row id
produced by an earlier operation through value back references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

from gallery_provider.core.uri import ResourceUri, parse_id
from gallery_provider.infrastructure.gallery_store import OperationApplicationError

if TYPE_CHECKING:
    from gallery_provider.services.provider import GalleryProvider


class OperationType(Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    ASSERT_QUERY = "assert_query"


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one operation: a row URI for inserts, a count otherwise."""

    uri: Optional[ResourceUri] = None
    count: Optional[int] = None


@dataclass(frozen=True)
class BatchOperation:
    """
    A single write (or assertion) to apply as part of a batch.

    Attributes:
        type: What the operation does
        uri: Target table URI
        values: Column values for inserts and updates
        selection: WHERE clause for deletes, updates and assertions
        selection_args: Bound parameters for ``selection``
        expected_count: If set, the affected row count must equal it
        value_back_references: (column, index) pairs; the column takes the
            row id (or count) produced by the operation at ``index``
    """

    type: OperationType
    uri: ResourceUri
    values: Optional[Mapping[str, Any]] = None
    selection: Optional[str] = None
    selection_args: Optional[tuple[Any, ...]] = None
    expected_count: Optional[int] = None
    value_back_references: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @classmethod
    def insert(
        cls,
        uri: ResourceUri | str,
        values: Mapping[str, Any],
        back_references: Optional[Mapping[str, int]] = None,
    ) -> "BatchOperation":
        return cls(
            type=OperationType.INSERT,
            uri=ResourceUri.parse(uri),
            values=dict(values),
            value_back_references=tuple((back_references or {}).items()),
        )

    @classmethod
    def delete(
        cls,
        uri: ResourceUri | str,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        expected_count: Optional[int] = None,
    ) -> "BatchOperation":
        return cls(
            type=OperationType.DELETE,
            uri=ResourceUri.parse(uri),
            selection=selection,
            selection_args=tuple(selection_args) if selection_args is not None else None,
            expected_count=expected_count,
        )

    @classmethod
    def update(
        cls,
        uri: ResourceUri | str,
        values: Mapping[str, Any],
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        expected_count: Optional[int] = None,
    ) -> "BatchOperation":
        return cls(
            type=OperationType.UPDATE,
            uri=ResourceUri.parse(uri),
            values=dict(values),
            selection=selection,
            selection_args=tuple(selection_args) if selection_args is not None else None,
            expected_count=expected_count,
        )

    @classmethod
    def assert_query(
        cls,
        uri: ResourceUri | str,
        expected_count: int,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
    ) -> "BatchOperation":
        return cls(
            type=OperationType.ASSERT_QUERY,
            uri=ResourceUri.parse(uri),
            selection=selection,
            selection_args=tuple(selection_args) if selection_args is not None else None,
            expected_count=expected_count,
        )

    def _resolve_values(self, results: Sequence[BatchResult], index: int) -> dict[str, Any]:
        values = dict(self.values or {})
        for column, ref in self.value_back_references:
            if ref < 0 or ref >= index:
                raise OperationApplicationError(
                    f"Back reference {ref} for {column} is not an earlier operation", index
                )
            result = results[ref]
            values[column] = parse_id(result.uri) if result.uri is not None else result.count
        return values

    def _check_count(self, count: int, index: int) -> None:
        if self.expected_count is not None and self.expected_count != count:
            raise OperationApplicationError(
                f"Wrong number of rows: expected {self.expected_count}, got {count}", index
            )

    def apply(
        self, provider: "GalleryProvider", results: Sequence[BatchResult], index: int
    ) -> BatchResult:
        """Apply this operation against ``provider``."""
        if self.type is OperationType.INSERT:
            return BatchResult(uri=provider.insert(self.uri, self._resolve_values(results, index)))

        if self.type is OperationType.DELETE:
            count = provider.delete(self.uri, self.selection, self.selection_args)
        elif self.type is OperationType.UPDATE:
            count = provider.update(
                self.uri, self._resolve_values(results, index), self.selection, self.selection_args
            )
        else:
            cursor = provider.query(self.uri, None, self.selection, self.selection_args, None)
            if cursor is None:
                raise OperationApplicationError("Query for assertion returned no cursor", index)
            with cursor:
                count = len(cursor)

        self._check_count(count, index)
        return BatchResult(count=count)
