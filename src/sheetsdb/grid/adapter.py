"""
Grid adapter over one Google Sheets spreadsheet.

This module provides the GridAdapter class, which presents row/column addressed
reads and writes over the transport. It handles:
- A cached full-grid snapshot, invalidated by every write
- Sheet resolution by id or title
- Translation of 1-indexed rows/columns into A1 ranges
- Dimension growth before writes that exceed the declared grid ("upsert")
- Re-anchoring appends the API placed at a column other than A
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import structlog

from sheetsdb.exceptions import InvalidArgumentError, SheetNotFoundError, TransportError
from sheetsdb.grid.addressing import (
    column_letter_to_index,
    columns_range,
    data_to_value,
    pad_row,
    parse_updated_range,
    row_range,
)
from sheetsdb.grid.operations import (
    AddSheet,
    AppendDimension,
    AppendResult,
    DeleteDimension,
    DeleteResult,
    DeleteSheet,
    Dimension,
    DimensionSpan,
    GridRequest,
    RowUpdate,
    UpdateResult,
)
from sheetsdb.grid.snapshot import CacheState, SheetSnapshot, SnapshotCache, SpreadsheetSnapshot
from sheetsdb.transport.base import (
    BATCH_UPDATE,
    DRIVE_FILES_GET,
    SPREADSHEETS_GET,
    VALUES_APPEND,
    VALUES_BATCH_UPDATE,
    VALUES_GET,
    Transport,
)

logger = structlog.get_logger()

# Upper bound for unbounded row reads
MAX_ROWS = 2_000_000

FILE_INFO_FIELDS = "id,name,kind,mimeType,createdTime,modifiedTime,size,version,lastModifyingUser"

RowData = Union[List[Any], Mapping[Any, Any]]


def _is_single_row(data: Any) -> bool:
    if isinstance(data, Mapping):
        return True
    first = data[0]
    return not isinstance(first, (list, tuple, Mapping))


def _spans(positions: Union[None, DimensionSpan, Iterable[int]]) -> List[DimensionSpan]:
    """Expand row/column positions into single spans, highest position first.

    Deleting from the bottom up keeps the positions of not-yet-deleted rows valid.
    """
    if positions is None:
        return []
    if isinstance(positions, DimensionSpan):
        return [positions]
    return [DimensionSpan(start=p) for p in sorted(set(positions), reverse=True)]


class GridAdapter:
    """Row/column CRUD over one spreadsheet.

    Reads are served from a cached snapshot unless ``fresh`` is requested. Every
    mutating call invalidates the snapshot, so the next read reflects the write.
    The cache is shared mutable state; overlapping reads and writes from
    concurrent tasks need external coordination.

    Attributes:
        transport: Transport used for all API calls
        spreadsheet_id: Id of the backing spreadsheet
        value_input_option: How written values are interpreted (USER_ENTERED or RAW)
        cache: Snapshot cache
    """

    def __init__(
        self,
        transport: Transport,
        spreadsheet_id: str,
        value_input_option: str = "USER_ENTERED",
    ) -> None:
        self.transport = transport
        self.spreadsheet_id = spreadsheet_id
        self.value_input_option = value_input_option
        self.cache = SnapshotCache()

    def invalidate(self) -> None:
        """Drop the cached snapshot."""
        self.cache.invalidate()

    async def load(self) -> Optional[SpreadsheetSnapshot]:
        """Return the spreadsheet snapshot, fetching it when the cache is empty.

        Load failures are logged and not raised: the caller gets whatever was
        cached, which after an invalidation is None.

        Returns:
            The snapshot, or None when it could not be fetched
        """
        if self.cache.state is CacheState.POPULATED:
            return self.cache.snapshot

        try:
            result = await self.transport.call(SPREADSHEETS_GET, {
                "spreadsheetId": self.spreadsheet_id,
                "includeGridData": True,
            })
            snapshot = SpreadsheetSnapshot.from_api(result)
        except (TransportError, ValueError) as e:
            logger.warning("snapshot_load_failed", spreadsheet_id=self.spreadsheet_id, error=str(e))
            return self.cache.snapshot

        self.cache.populate(snapshot)
        logger.debug("snapshot_loaded", spreadsheet_id=self.spreadsheet_id, sheets=len(snapshot.sheets))
        return snapshot

    async def get_sheet(self, selector: Any = None) -> SheetSnapshot:
        """Resolve a sheet by id first, then by title.

        Args:
            selector: Sheet id or title; None selects sheet id 0

        Returns:
            The sheet snapshot

        Raises:
            SheetNotFoundError: If no sheet matches or no snapshot is available
        """
        spreadsheet = await self.load()
        if spreadsheet is None:
            raise SheetNotFoundError(f"Sheet not found: {selector!r} (spreadsheet could not be loaded)")

        sheet = spreadsheet.find_sheet(selector)
        if sheet is None:
            raise SheetNotFoundError(f"Sheet not found: {selector!r}")
        return sheet

    async def list(
        self,
        sheet: Any = None,
        start: int = 1,
        limit: Optional[int] = None,
        fresh: bool = False,
    ) -> List[List[Optional[str]]]:
        """Read rows ``start .. start + limit - 1``.

        Args:
            sheet: Sheet selector
            start: First row (1-indexed)
            limit: Number of rows; None reads to the end of the sheet
            fresh: Read the range directly instead of from the snapshot

        Returns:
            Rows of cell texts. Snapshot reads use None for empty cells; fresh
            reads return whatever the API returns (trailing empties trimmed).
        """
        end = start + (MAX_ROWS if limit is None else limit) - 1
        selected = await self.get_sheet(sheet)

        if fresh:
            result = await self.transport.call(VALUES_GET, {
                "spreadsheetId": self.spreadsheet_id,
                "range": row_range(selected.title, start, end),
            })
            return (result or {}).get("values", [])

        return selected.texts(start, end)

    async def append(self, data: Union[RowData, Sequence[RowData]], sheet: Any = None) -> AppendResult:
        """Append rows after the existing table content.

        If the API places the rows starting at a column other than A, a second
        write re-anchors them at column A. Each corrected row is padded with
        empty strings up to the reported end column so the misplaced copies are
        cleared.

        Args:
            data: One row or a list of rows; each row is a value list or a sparse
                  mapping keyed by column letter / 1-indexed number
            sheet: Sheet selector

        Returns:
            AppendResult with the inserted row span

        Raises:
            InvalidArgumentError: If data is empty
            SheetNotFoundError: If the sheet does not resolve
            TransportError: If a write fails
        """
        if not data:
            raise InvalidArgumentError("No rows to append")

        selected = await self.get_sheet(sheet)
        items = [data] if _is_single_row(data) else list(data)
        values = [data_to_value(item) for item in items]

        table_range = columns_range(selected.title)
        result = await self.transport.call(VALUES_APPEND, {
            "spreadsheetId": self.spreadsheet_id,
            "range": table_range,
            "insertDataOption": "INSERT_ROWS",
            "valueInputOption": self.value_input_option,
            "resource": {
                "range": table_range,
                "majorDimension": "ROWS",
                "values": values,
            },
        })
        self.invalidate()

        updates = result["updates"]
        updated = parse_updated_range(updates["updatedRange"])

        if updated.start_column != "A":
            width = column_letter_to_index(updated.end_column)
            corrected = [
                ["" if v is None else v for v in pad_row(value, width)]
                for value in values
            ]
            logger.debug(
                "append_reanchored",
                sheet=selected.title,
                start_column=updated.start_column,
                start_row=updated.start_row,
                end_row=updated.end_row,
            )
            await self.transport.call(VALUES_BATCH_UPDATE, {
                "spreadsheetId": self.spreadsheet_id,
                "resource": {
                    "valueInputOption": self.value_input_option,
                    "data": [{
                        "range": row_range(selected.title, updated.start_row, updated.end_row),
                        "majorDimension": "ROWS",
                        "values": corrected,
                    }],
                },
            })

        logger.debug("rows_appended", sheet=updated.title, start_row=updated.start_row, end_row=updated.end_row)
        return AppendResult(
            spreadsheet_id=updates.get("spreadsheetId", self.spreadsheet_id),
            sheet=updated.title,
            start_row=updated.start_row,
            end_row=updated.end_row,
            inserted_rows=updates.get("updatedRows", updated.end_row - updated.start_row + 1),
        )

    async def update(
        self,
        data: Union[Mapping[Any, RowData], Sequence[Union[RowUpdate, Mapping[str, Any]]], None],
        sheet: Any = None,
        upsert: bool = True,
    ) -> UpdateResult:
        """Overwrite whole rows in one batched request.

        Args:
            data: Mapping of row number to row data, or a list of RowUpdate /
                  ``{"row", "data"}`` items
            sheet: Sheet selector
            upsert: Grow the sheet first when a row or column lies beyond its
                    declared dimensions

        Returns:
            UpdateResult with the number of rows written

        Raises:
            SheetNotFoundError: If the sheet does not resolve
            TransportError: If a write fails
        """
        if not data:
            return UpdateResult()

        selected = await self.get_sheet(sheet)
        if isinstance(data, Mapping):
            rows = [RowUpdate(row=int(key), data=value) for key, value in data.items()]
        else:
            rows = [RowUpdate.coerce(item) for item in data]

        add_rows = 0
        add_columns = 0
        ranges: List[Dict[str, Any]] = []
        for item in rows:
            value = data_to_value(item.data)
            add_rows = max(add_rows, item.row - selected.row_count)
            add_columns = max(add_columns, len(value) - selected.column_count)
            ranges.append({
                "range": row_range(selected.title, item.row),
                "majorDimension": "ROWS",
                "values": [value],
            })

        # The grid must be large enough before values land in it
        if upsert:
            await self.expand(rows=add_rows, columns=add_columns, sheet_id=selected.id)

        await self.transport.call(VALUES_BATCH_UPDATE, {
            "spreadsheetId": self.spreadsheet_id,
            "resource": {
                "valueInputOption": self.value_input_option,
                "data": ranges,
            },
        })
        self.invalidate()

        logger.debug("rows_updated", sheet=selected.title, rows=len(ranges))
        return UpdateResult(updated_rows=len(ranges))

    async def delete(
        self,
        rows: Union[None, DimensionSpan, Iterable[int]] = None,
        columns: Union[None, DimensionSpan, Iterable[int]] = None,
        sheet: Any = None,
    ) -> DeleteResult:
        """Delete whole rows and/or columns by position.

        Args:
            rows: Row positions (1-indexed) or a DimensionSpan
            columns: Column positions (1-indexed) or a DimensionSpan
            sheet: Sheet selector

        Returns:
            DeleteResult with the number of rows and columns removed

        Raises:
            SheetNotFoundError: If the sheet does not resolve
            TransportError: If the request fails
        """
        selected = await self.get_sheet(sheet)

        requests: List[GridRequest] = []
        result = DeleteResult()
        for span in _spans(rows):
            requests.append(DeleteDimension(selected.id, Dimension.ROWS, span.start, span.limit))
            result.deleted_rows += span.limit
        for span in _spans(columns):
            requests.append(DeleteDimension(selected.id, Dimension.COLUMNS, span.start, span.limit))
            result.deleted_columns += span.limit

        if requests:
            await self.request(requests)
            logger.debug(
                "dimensions_deleted",
                sheet=selected.title,
                rows=result.deleted_rows,
                columns=result.deleted_columns,
            )

        self.invalidate()
        return result

    async def expand(self, rows: int = 0, columns: int = 0, sheet_id: int = 0) -> Optional[Dict[str, Any]]:
        """Append empty rows and/or columns to a sheet.

        No request is sent when both counts are zero.

        Returns:
            The batchUpdate response, or None when nothing was requested
        """
        requests: List[GridRequest] = []
        if rows and rows > 0:
            requests.append(AppendDimension(sheet_id, Dimension.ROWS, rows))
        if columns and columns > 0:
            requests.append(AppendDimension(sheet_id, Dimension.COLUMNS, columns))

        if not requests:
            return None

        logger.debug("sheet_expanded", sheet_id=sheet_id, rows=rows, columns=columns)
        return await self.request(requests)

    async def add_sheet(self, title: str) -> SheetSnapshot:
        """Create a new sheet.

        Returns:
            Metadata of the created sheet (no cells)
        """
        result = await self.request([AddSheet(title)])
        self.invalidate()

        properties = result["replies"][0]["addSheet"]["properties"]
        logger.debug("sheet_added", title=title, sheet_id=properties.get("sheetId"))
        return SheetSnapshot.from_properties(properties)

    async def delete_sheet(self, sheet: Any) -> Dict[str, Any]:
        """Remove a sheet.

        Raises:
            SheetNotFoundError: If the sheet does not resolve
        """
        selected = await self.get_sheet(sheet)
        result = await self.request([DeleteSheet(selected.id)])
        self.invalidate()

        logger.debug("sheet_deleted", title=selected.title, sheet_id=selected.id)
        return result

    async def request(self, requests: Sequence[Union[GridRequest, Dict[str, Any]]]) -> Dict[str, Any]:
        """Send a ``spreadsheets.batchUpdate`` with the given requests.

        Any structural change invalidates the snapshot.
        """
        body = [r.to_request() if hasattr(r, "to_request") else r for r in requests]
        result = await self.transport.call(BATCH_UPDATE, {
            "spreadsheetId": self.spreadsheet_id,
            "resource": {"requests": body},
        })
        self.invalidate()
        return result

    async def get_file_info(self) -> Dict[str, Any]:
        """Fetch the Drive file metadata of the spreadsheet."""
        return await self.transport.call(DRIVE_FILES_GET, {
            "fileId": self.spreadsheet_id,
            "fields": FILE_INFO_FIELDS,
        })
