"""
Abstract transport interface for the Google Sheets and Drive APIs.

The Transport protocol defines the single operation the grid adapter consumes:
an asynchronous ``call(method, params)`` against a named API method. Concrete
implementations include GspreadTransport (gspread's HTTP client) and the fake
transport used by the test suite.
"""

from typing import Any, Dict, FrozenSet, Protocol


SPREADSHEETS_GET = "spreadsheets.get"
VALUES_GET = "spreadsheets.values.get"
VALUES_APPEND = "spreadsheets.values.append"
VALUES_BATCH_UPDATE = "spreadsheets.values.batchUpdate"
BATCH_UPDATE = "spreadsheets.batchUpdate"
DRIVE_FILES_GET = "drive.files.get"

METHODS: FrozenSet[str] = frozenset({
    SPREADSHEETS_GET,
    VALUES_GET,
    VALUES_APPEND,
    VALUES_BATCH_UPDATE,
    BATCH_UPDATE,
    DRIVE_FILES_GET,
})


class Transport(Protocol):
    """Protocol for API transports.

    Parameters use the Google API discovery names (``spreadsheetId``, ``range``,
    ``includeGridData``, ``valueInputOption``, ``insertDataOption``, ``resource``
    for the request body, ``fileId`` and ``fields`` for Drive). Responses are the
    decoded JSON bodies.
    """

    async def call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke an API method.

        Args:
            method: One of the names in ``METHODS``
            params: Request parameters; the request body goes under ``resource``

        Returns:
            The decoded response body

        Raises:
            TransportError: If the call fails
        """
        ...
