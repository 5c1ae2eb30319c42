"""
Grid request and result classes.

This module defines the structural requests the grid adapter sends through
``spreadsheets.batchUpdate`` and the results it returns:

- AppendDimension: Grow a sheet by a number of rows or columns
- DeleteDimension: Remove a span of rows or columns
- AddSheet / DeleteSheet: Create or remove a sheet (tab)
- RowUpdate / DimensionSpan: Caller-facing inputs for update and delete
- AppendResult / UpdateResult / DeleteResult: Outcomes of the write operations
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Union


class Dimension(str, Enum):
    ROWS = "ROWS"
    COLUMNS = "COLUMNS"


@dataclass
class AppendDimension:
    """Append empty rows or columns at the end of a sheet.

    Attributes:
        sheet_id: Target sheet id
        dimension: ROWS or COLUMNS
        length: Number of rows/columns to add
    """
    sheet_id: int
    dimension: Dimension
    length: int

    def to_request(self) -> Dict[str, Any]:
        """Convert to a batchUpdate request object."""
        return {
            "appendDimension": {
                "sheetId": self.sheet_id,
                "dimension": self.dimension.value,
                "length": self.length,
            }
        }


@dataclass
class DeleteDimension:
    """Delete a span of rows or columns.

    Attributes:
        sheet_id: Target sheet id
        dimension: ROWS or COLUMNS
        start: First row/column to delete (1-indexed)
        limit: Number of rows/columns to delete
    """
    sheet_id: int
    dimension: Dimension
    start: int
    limit: int = 1

    def to_request(self) -> Dict[str, Any]:
        """Convert to a batchUpdate request object (0-indexed, end exclusive)."""
        return {
            "deleteDimension": {
                "range": {
                    "sheetId": self.sheet_id,
                    "dimension": self.dimension.value,
                    "startIndex": self.start - 1,
                    "endIndex": self.start + self.limit - 1,
                }
            }
        }


@dataclass
class AddSheet:
    """Create a new sheet with the given title."""
    title: str

    def to_request(self) -> Dict[str, Any]:
        return {"addSheet": {"properties": {"title": self.title}}}


@dataclass
class DeleteSheet:
    """Remove the sheet with the given id."""
    sheet_id: int

    def to_request(self) -> Dict[str, Any]:
        return {"deleteSheet": {"sheetId": self.sheet_id}}


# Type alias for all batchUpdate request types
GridRequest = Union[AppendDimension, DeleteDimension, AddSheet, DeleteSheet]


@dataclass
class RowUpdate:
    """New content for one row.

    Attributes:
        row: Target row (1-indexed)
        data: Value list or sparse mapping keyed by column letter / 1-indexed number
    """
    row: int
    data: Union[List[Any], Mapping[Any, Any]]

    @classmethod
    def coerce(cls, item: Any) -> "RowUpdate":
        """Accept a RowUpdate or a ``{"row": ..., "data": ...}`` mapping."""
        if isinstance(item, RowUpdate):
            return item
        return cls(row=int(item["row"]), data=item["data"])


@dataclass
class DimensionSpan:
    """A contiguous span of rows or columns.

    Attributes:
        start: First row/column (1-indexed)
        limit: Number of rows/columns
    """
    start: int
    limit: int = 1


@dataclass
class AppendResult:
    """Outcome of an append.

    Attributes:
        spreadsheet_id: Spreadsheet the rows were appended to
        sheet: Title of the sheet, as reported by the API
        start_row: First inserted row (1-indexed)
        end_row: Last inserted row (1-indexed, inclusive)
        inserted_rows: Number of rows the API reports as written
    """
    spreadsheet_id: str
    sheet: str
    start_row: int
    end_row: int
    inserted_rows: int


@dataclass
class UpdateResult:
    """Outcome of a row update."""
    updated_rows: int = 0


@dataclass
class DeleteResult:
    """Outcome of a row/column delete."""
    deleted_rows: int = 0
    deleted_columns: int = 0
