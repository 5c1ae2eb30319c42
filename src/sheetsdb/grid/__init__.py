"""
Grid module for sheetsdb.

This module provides the row/column layer over a spreadsheet: A1 addressing,
the snapshot cache, batchUpdate request types, and the GridAdapter.
"""

from sheetsdb.grid.adapter import GridAdapter
from sheetsdb.grid.addressing import (
    ColumnRef,
    column_letter_to_index,
    column_to_letter,
    data_to_value,
    parse_updated_range,
    resolve_column,
    row_range,
)
from sheetsdb.grid.operations import (
    AppendResult,
    DeleteResult,
    DimensionSpan,
    RowUpdate,
    UpdateResult,
)
from sheetsdb.grid.snapshot import (
    CacheState,
    Cell,
    SheetSnapshot,
    SnapshotCache,
    SpreadsheetSnapshot,
)

__all__ = [
    "GridAdapter",
    "ColumnRef",
    "column_letter_to_index",
    "column_to_letter",
    "data_to_value",
    "parse_updated_range",
    "resolve_column",
    "row_range",
    "AppendResult",
    "DeleteResult",
    "DimensionSpan",
    "RowUpdate",
    "UpdateResult",
    "CacheState",
    "Cell",
    "SheetSnapshot",
    "SnapshotCache",
    "SpreadsheetSnapshot",
]
