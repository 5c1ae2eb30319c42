"""
sheetsdb - A schemaless document store on top of Google Sheets.

This package treats each sheet of a spreadsheet as a collection of JSON-like
documents. Row 1 holds the field names; every other row is a document. Queries,
sorting and update operators run in memory over the rows read from the sheet.

Usage:
    >>> import asyncio
    >>> import sheetsdb
    >>> sheet = sheetsdb.open_sheet()  # SHEETSDB_SPREADSHEET_ID, service account
    >>> asyncio.run(sheet.insert({"name": "cat", "age": 5}))
    >>> asyncio.run(sheet.find({"name": "ca*"}, sort={"age": -1}))

Key components:
- Sheet: document operations (insert, find, update, delete)
- GridAdapter: cached row/column access to one spreadsheet
- GspreadTransport: Google Sheets / Drive API calls via gspread
"""

from typing import Any, Optional

import gspread

from .config import Settings, get_settings
from .documents import DocumentList, Sheet
from .exceptions import *
from .grid import GridAdapter
from .transport import GspreadTransport, Transport

# Version
__version__ = "0.1.0"

__all__ = [
    'DocumentList',
    'GridAdapter',
    'GspreadTransport',
    'Settings',
    'Sheet',
    'Transport',
    'open_sheet',
    'SheetsDBError',
    'SheetNotFoundError',
    'InvalidArgumentError',
    'TransportError',
]


def open_sheet(
    settings: Optional[Settings] = None,
    gc: Optional[gspread.Client] = None,
    sheet: Any = None,
) -> Sheet:
    """Build a Sheet for the configured spreadsheet.

    Args:
        settings: Settings to use; defaults to ``get_settings()``
        gc: Authenticated gspread client; when omitted one is created with
            ``gspread.service_account`` from ``settings.credentials_file``
        sheet: Sheet selector overriding ``settings.sheet``

    Returns:
        Sheet bound to a fresh GridAdapter

    Raises:
        InvalidArgumentError: If no spreadsheet id is configured
    """
    settings = settings or get_settings()
    if not settings.spreadsheet_id:
        raise InvalidArgumentError("No spreadsheet id configured (SHEETSDB_SPREADSHEET_ID)")

    if gc is None:
        if settings.credentials_file:
            gc = gspread.service_account(filename=settings.credentials_file)
        else:
            gc = gspread.service_account()

    adapter = GridAdapter(
        GspreadTransport(gc),
        settings.spreadsheet_id,
        value_input_option=settings.value_input_option,
    )
    return Sheet(adapter, sheet=settings.sheet if sheet is None else sheet)
