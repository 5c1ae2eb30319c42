"""
Document operations over one sheet.

This module provides the Sheet class, which treats a sheet as a collection of
JSON-like documents. Row 1 is the header: each header name is a field, and each
following non-empty row is a document carrying its row number in ``_row``.

Every operation reads through the grid adapter, works on the materialized rows in
memory, and then issues at most one batched write (insert may first rewrite the
header). Nothing is atomic across calls: an insert that extends the header and
then fails to append leaves the extra header columns in place, and two concurrent
inserts adding the same new field can both append it.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import structlog

from sheetsdb.documents.header import ROW_FIELD, Header
from sheetsdb.documents.operators import compile_patch
from sheetsdb.documents.query import build_filter_fn, sort_documents
from sheetsdb.exceptions import InvalidArgumentError
from sheetsdb.grid.adapter import GridAdapter
from sheetsdb.grid.addressing import column_to_letter
from sheetsdb.grid.operations import DeleteResult, RowUpdate, UpdateResult
from sheetsdb.grid.snapshot import SpreadsheetSnapshot

logger = structlog.get_logger()

Document = Dict[str, Any]


class DocumentList(list):
    """List of documents, optionally carrying the header used to build them.

    Attributes:
        header: Header names when requested with ``header=True``, else None
    """

    def __init__(self, documents: Iterable[Document] = (), header: Optional[List[str]] = None) -> None:
        super().__init__(documents)
        self.header = header


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _is_empty_row(row: Sequence[Any]) -> bool:
    return all(value is None or value == "" for value in row)


def values_to_data(
    values: Optional[Sequence[Sequence[Any]]],
    start_row: Optional[int] = None,
    column: bool = False,
    lowercase: bool = False,
    header: bool = False,
) -> DocumentList:
    """Convert rows into documents.

    The first row is the header and never becomes a document. Rows whose cells are
    all empty are skipped. Every named header field is set on every document,
    empty cells as "".

    Args:
        values: Rows of cell values, header first
        start_row: Sheet row of ``values[1]``; when None, ``values[i]`` is row ``i + 1``
        column: Also key each cell by its column letter
        lowercase: Lower-case the header names
        header: Attach the (possibly lower-cased) header to the result

    Returns:
        DocumentList in row order
    """
    if not values or values[0] is None:
        return DocumentList()

    names = [_text(name).lower() if lowercase else _text(name) for name in values[0]]
    documents = DocumentList()

    for i, row in enumerate(values):
        if i == 0 or _is_empty_row(row):
            continue

        document: Document = {ROW_FIELD: start_row + i - 1 if start_row else i + 1}
        for name in names:
            if name:
                document[name] = ""
        for j, value in enumerate(row):
            name = names[j] if j < len(names) else ""
            if name:
                document[name] = _text(value)
            if column:
                document[column_to_letter(j + 1)] = _text(value)
        documents.append(document)

    if header:
        documents.header = names
    return documents


def filter_data(
    documents: DocumentList,
    query: Optional[Mapping[str, Any]] = None,
    skip: int = 0,
    limit: Optional[int] = None,
    sort: Optional[Mapping[str, Any]] = None,
) -> DocumentList:
    """Apply filter, then sort, then the skip/limit window.

    Args:
        documents: Documents to filter
        query: Query mapping; None or empty matches everything
        skip: Number of matches to drop from the front
        limit: Maximum number of documents to return; None or 0 for no limit
        sort: Sort mapping

    Returns:
        DocumentList carrying the input's header
    """
    matches = build_filter_fn(query)
    result = sort_documents([d for d in documents if matches(d)], sort)
    if skip and skip > 0:
        result = result[skip:]
    if limit and limit > 0:
        result = result[:limit]
    return DocumentList(result, header=documents.header)


class Sheet:
    """Document collection backed by one sheet.

    Attributes:
        adapter: Grid adapter for the spreadsheet
        sheet: Sheet selector (id or title); None selects sheet id 0
    """

    def __init__(self, adapter: GridAdapter, sheet: Any = None) -> None:
        self.adapter = adapter
        self.sheet = sheet

    async def raw(self) -> Optional[SpreadsheetSnapshot]:
        """Return the spreadsheet snapshot the documents are read from."""
        return await self.adapter.load()

    async def get_header(self) -> List[str]:
        """Return row 1 as a list of names, empty when the sheet has no header."""
        values = await self.adapter.list(sheet=self.sheet, limit=1)
        return Header(values[0]).names if values else []

    async def update_header(self, header: Sequence[str]) -> UpdateResult:
        """Rewrite row 1 with the given names."""
        return await self.adapter.update({1: list(header)}, sheet=self.sheet)

    async def insert(self, data: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> DocumentList:
        """Insert one or more documents.

        Fields missing from the header are appended to it, and the header is
        rewritten before the rows are appended. The ``_row`` field of input
        documents is ignored.

        Args:
            data: A document or a list of documents

        Returns:
            The inserted documents with string values and their ``_row``
        """
        items = [data] if isinstance(data, Mapping) else list(data)
        if not items:
            return DocumentList()

        header = Header(await self.get_header())
        values: List[List[Any]] = []
        for item in items:
            value: List[Any] = []
            for key, field_value in item.items():
                if key == ROW_FIELD:
                    continue
                index = header.ensure(key)
                if index >= len(value):
                    value.extend([None] * (index + 1 - len(value)))
                value[index] = field_value
            values.append(value)

        if header.added:
            logger.debug("header_extended", sheet=self.sheet, columns=header.added)
            await self.update_header(header.names)

        result = await self.adapter.append(values, sheet=self.sheet)
        logger.debug("documents_inserted", sheet=self.sheet, count=len(values), start_row=result.start_row)
        return values_to_data([header.names] + values, start_row=result.start_row)

    async def find(
        self,
        query: Optional[Mapping[str, Any]] = None,
        header: bool = False,
        skip: int = 0,
        limit: Optional[int] = None,
        sort: Optional[Mapping[str, Any]] = None,
        lowercase: bool = False,
        column: bool = False,
        fresh: bool = False,
    ) -> DocumentList:
        """Find documents matching a query.

        Args:
            query: Query mapping (see ``sheetsdb.documents.query``)
            header: Attach the header to the result as ``result.header``
            skip: Number of matches to skip after sorting
            limit: Maximum number of documents to return
            sort: Field name to weight; negative weights sort descending
            lowercase: Lower-case header names before matching
            column: Also expose each cell under its column letter
            fresh: Read the sheet directly instead of from the snapshot

        Returns:
            Matching documents
        """
        values = await self.adapter.list(sheet=self.sheet, fresh=fresh)
        documents = values_to_data(values, column=column, lowercase=lowercase, header=header)
        return filter_data(documents, query, skip=skip, limit=limit, sort=sort)

    async def find_one(self, query: Optional[Mapping[str, Any]] = None, **options: Any) -> Optional[Document]:
        """Find the first document matching a query, or None."""
        options["limit"] = 1
        documents = await self.find(query, **options)
        return documents[-1] if documents else None

    async def find_frame(self, query: Optional[Mapping[str, Any]] = None, **options: Any):
        """Find documents and return them as a pandas DataFrame indexed by ``_row``."""
        from sheetsdb.frames import documents_to_frame

        options["header"] = True
        return documents_to_frame(await self.find(query, **options))

    async def update(self, query: Optional[Mapping[str, Any]], patch: Mapping[str, Any]) -> UpdateResult:
        """Update the documents matching a query.

        The patch is compiled once and applied to each matched document's current
        values. Fields that are not in the header are skipped. All rows are
        written in one batched request.

        Args:
            query: Query mapping; None or empty matches every document
            patch: Field name to literal or operator mapping

        Returns:
            UpdateResult with the number of rows written
        """
        updates = compile_patch(patch)
        documents = await self.find(query, header=True)
        header = Header(documents.header)

        rows: Dict[int, Dict[int, str]] = {}
        for document in documents:
            row = document[ROW_FIELD]
            if row in rows:
                continue
            line: Dict[int, str] = {}
            for update in updates:
                column = header.column_of(update.name)
                if column is None:
                    continue
                value = update.apply(document.get(update.name, ""))
                if value is not None:
                    line[column] = value
            rows[row] = line

        data = [RowUpdate(row=row, data=line) for row, line in rows.items() if line]
        return await self.adapter.update(data, sheet=self.sheet)

    async def delete(self, query: Optional[Mapping[str, Any]]) -> DeleteResult:
        """Delete the rows of the documents matching a query.

        Raises:
            InvalidArgumentError: If query is None or empty
        """
        if not query:
            raise InvalidArgumentError("No query specified; refusing to delete every row")

        documents = await self.find(query)
        rows = [document[ROW_FIELD] for document in documents]
        return await self.adapter.delete(rows=rows, sheet=self.sheet)
