"""
Exception classes for sheetsdb.

These exceptions are used throughout the sheetsdb package to signal error conditions
raised while resolving sheets, validating document operations, and talking to the
Google Sheets API.
"""


class SheetsDBError(Exception):
    """Base class for all sheetsdb errors."""
    pass


class SheetNotFoundError(SheetsDBError):
    """Raised when a sheet selector does not resolve to a sheet.

    A selector is either a numeric sheet id (gid) or an exact sheet title. This
    error is also raised when no spreadsheet snapshot could be loaded at all,
    since no selector can resolve against an empty spreadsheet.
    """
    pass


class InvalidArgumentError(SheetsDBError):
    """Raised when a document operation is called with unusable arguments.

    The operation is rejected before any request is sent. Examples:
        - ``Sheet.delete`` called without a query (deleting every row is refused)
        - Column letters containing characters outside A-Z
    """
    pass


class TransportError(SheetsDBError):
    """Raised when a Google Sheets or Drive API call fails.

    This error wraps exceptions from the transport (gspread's ``APIError`` for
    ``GspreadTransport``) and carries the method name that failed. Common causes:
        - Authentication failures
        - Rate limiting (HTTP 429)
        - Out of range writes when the sheet was not expanded first
        - Invalid spreadsheet IDs or permission errors

    Attributes:
        method: The API method name, e.g. ``"spreadsheets.values.append"``
    """

    def __init__(self, message: str, method: str = "") -> None:
        super().__init__(message)
        self.method = method
