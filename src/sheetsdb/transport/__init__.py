"""
Transport module for sheetsdb.

This module provides the asynchronous ``call(method, params)`` boundary the grid
adapter talks through. ``GspreadTransport`` targets the Google Sheets and Drive
APIs via gspread.
"""

from sheetsdb.transport.base import METHODS, Transport
from sheetsdb.transport.gspread_transport import GspreadTransport

__all__ = [
    "METHODS",
    "Transport",
    "GspreadTransport",
]
