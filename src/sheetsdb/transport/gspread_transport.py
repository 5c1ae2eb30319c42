"""
gspread-backed transport.

This module maps the transport method names onto gspread's HTTP client, with
error wrapping for API, network and credential failures, and thread offloading
so the blocking requests do not stall the event loop.
"""

import asyncio
from typing import Any, Callable, Dict

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import APIError
from gspread.urls import DRIVE_FILES_API_V3_URL

from sheetsdb.exceptions import TransportError
from sheetsdb.transport.base import (
    BATCH_UPDATE,
    DRIVE_FILES_GET,
    SPREADSHEETS_GET,
    VALUES_APPEND,
    VALUES_BATCH_UPDATE,
    VALUES_GET,
)


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class GspreadTransport:
    """
    Transport over an authenticated gspread client.

    Each method name is dispatched to the matching ``gspread.HTTPClient`` call.
    gspread's ``APIError``, ``requests`` network errors and google-auth
    credential errors are re-raised as ``TransportError`` with the method
    name attached.

    Attributes:
        gc: The authenticated gspread client instance
    """

    def __init__(self, gc: gspread.Client) -> None:
        """
        Initialize the transport with an authenticated gspread client.

        Args:
            gc: An authenticated gspread client, e.g. from ``gspread.service_account()``
                or ``gspread.oauth()``.
        """
        self.gc = gc
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            SPREADSHEETS_GET: self._spreadsheets_get,
            VALUES_GET: self._values_get,
            VALUES_APPEND: self._values_append,
            VALUES_BATCH_UPDATE: self._values_batch_update,
            BATCH_UPDATE: self._batch_update,
            DRIVE_FILES_GET: self._drive_files_get,
        }

    async def call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke an API method in a worker thread.

        Args:
            method: Transport method name, e.g. ``"spreadsheets.values.get"``
            params: Request parameters, body under ``resource``

        Returns:
            The decoded response body

        Raises:
            ValueError: If the method name is unknown
            TransportError: If the API call fails
        """
        handler = self._handlers.get(method)
        if handler is None:
            raise ValueError(f"Unknown transport method: {method}")

        try:
            return await asyncio.to_thread(handler, params)
        except (APIError, requests.exceptions.RequestException, GoogleAuthError) as e:
            raise TransportError(f"Failed to call {method}: {e}", method=method) from e

    def _spreadsheets_get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {"includeGridData": _query_value(params.get("includeGridData", False))}
        return self.gc.http_client.fetch_sheet_metadata(params["spreadsheetId"], params=query)

    def _values_get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.gc.http_client.values_get(params["spreadsheetId"], params["range"])

    def _values_append(self, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {
            "valueInputOption": params.get("valueInputOption", "USER_ENTERED"),
            "insertDataOption": params.get("insertDataOption", "INSERT_ROWS"),
        }
        return self.gc.http_client.values_append(
            params["spreadsheetId"], params["range"], query, params["resource"]
        )

    def _values_batch_update(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.gc.http_client.values_batch_update(
            params["spreadsheetId"], body=params["resource"]
        )

    def _batch_update(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.gc.http_client.batch_update(params["spreadsheetId"], params["resource"])

    def _drive_files_get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{DRIVE_FILES_API_V3_URL}/{params['fileId']}"
        query = {"supportsAllDrives": True}
        if params.get("fields"):
            query["fields"] = params["fields"]
        response = self.gc.http_client.request("get", url, params=query)
        return response.json()
