"""
Spreadsheet snapshot model and cache.

A snapshot is the full-grid read of one spreadsheet (``spreadsheets.get`` with grid
data). The cache holds at most one snapshot and is either empty or populated for
every sheet of the spreadsheet. There is no row-level granularity: any write
through the grid adapter invalidates the whole snapshot, so the next read
refetches everything.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Cell:
    """A non-empty grid cell.

    Attributes:
        text: The cell's formatted (display) value
    """
    text: Optional[str]


@dataclass
class SheetSnapshot:
    """Metadata and cell matrix of one sheet (tab).

    Attributes:
        id: Numeric sheet id (gid)
        title: Sheet title
        index: Position among sibling sheets
        type: Sheet type reported by the API (e.g. GRID)
        row_count: Declared number of rows
        column_count: Declared number of columns
        values: Row-major matrix; a cell is None when it has no entered value
    """
    id: int
    title: str
    index: int = 0
    type: Optional[str] = None
    row_count: int = 0
    column_count: int = 0
    values: List[List[Optional[Cell]]] = field(default_factory=list)

    @classmethod
    def from_properties(cls, properties: Dict[str, Any]) -> "SheetSnapshot":
        """Build sheet metadata (without cells) from an API ``properties`` object."""
        grid = properties.get("gridProperties", {})
        return cls(
            id=properties.get("sheetId", 0),
            title=properties.get("title", ""),
            index=properties.get("index", 0),
            type=properties.get("sheetType"),
            row_count=grid.get("rowCount", 0),
            column_count=grid.get("columnCount", 0),
        )

    @classmethod
    def from_api(cls, sheet: Dict[str, Any]) -> "SheetSnapshot":
        """Build a sheet snapshot from one entry of the ``sheets`` array."""
        snapshot = cls.from_properties(sheet.get("properties", {}))
        data = sheet.get("data") or []
        row_data = data[0].get("rowData") if data else None
        if row_data:
            snapshot.values = [
                [
                    Cell(item.get("formattedValue")) if item.get("userEnteredValue") is not None else None
                    for item in row.get("values", [])
                ]
                for row in row_data
            ]
        return snapshot

    def texts(self, start: int = 1, end: Optional[int] = None) -> List[List[Optional[str]]]:
        """Return rows ``start..end`` (1-indexed, inclusive) as cell texts."""
        rows = self.values[start - 1:end]
        return [[cell.text if cell else None for cell in row] for row in rows]


@dataclass
class SpreadsheetSnapshot:
    """Full-grid read of a spreadsheet.

    Attributes:
        id: Spreadsheet id
        url: Spreadsheet URL
        title: Spreadsheet title
        locale: Spreadsheet locale
        time_zone: Spreadsheet time zone
        sheets: Snapshots of every sheet, in API order
    """
    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    locale: Optional[str] = None
    time_zone: Optional[str] = None
    sheets: List[SheetSnapshot] = field(default_factory=list)

    @classmethod
    def from_api(cls, result: Dict[str, Any]) -> "SpreadsheetSnapshot":
        """Build a snapshot from a ``spreadsheets.get`` response.

        Raises:
            ValueError: If the response carries no ``sheets``
        """
        if not result or "sheets" not in result:
            raise ValueError("Spreadsheet response has no sheets")

        properties = result.get("properties", {})
        return cls(
            id=result.get("spreadsheetId", ""),
            url=result.get("spreadsheetUrl"),
            title=properties.get("title"),
            locale=properties.get("locale"),
            time_zone=properties.get("timeZone"),
            sheets=[SheetSnapshot.from_api(sheet) for sheet in result["sheets"]],
        )

    def find_sheet(self, selector: Any = None) -> Optional[SheetSnapshot]:
        """Resolve a sheet by numeric id first, then by exact title.

        Args:
            selector: Sheet id (int or numeric string) or title; None selects id 0

        Returns:
            The matching sheet, or None
        """
        key = 0 if selector is None or selector == "" else selector
        for sheet in self.sheets:
            if str(sheet.id) == str(key):
                return sheet
        for sheet in self.sheets:
            if sheet.title == key:
                return sheet
        return None


class CacheState(Enum):
    EMPTY = "empty"
    POPULATED = "populated"


class SnapshotCache:
    """Holds at most one spreadsheet snapshot.

    ``invalidate`` is the only way back to the empty state and is called by every
    mutating grid adapter operation.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[SpreadsheetSnapshot] = None

    @property
    def state(self) -> CacheState:
        return CacheState.EMPTY if self._snapshot is None else CacheState.POPULATED

    @property
    def snapshot(self) -> Optional[SpreadsheetSnapshot]:
        return self._snapshot

    def populate(self, snapshot: SpreadsheetSnapshot) -> None:
        self._snapshot = snapshot

    def invalidate(self) -> None:
        self._snapshot = None
