"""
Unit tests for settings and the open_sheet factory.
"""

from unittest.mock import Mock

import gspread
import pytest
import structlog

import sheetsdb
from sheetsdb.config import Settings, get_settings, reset_settings
from sheetsdb.exceptions import InvalidArgumentError
from sheetsdb.log import configure_logging
from sheetsdb.transport import GspreadTransport


@pytest.fixture(autouse=True)
def _clean_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SHEETSDB_SPREADSHEET_ID", raising=False)
        settings = Settings(_env_file=None)
        assert settings.spreadsheet_id == ""
        assert settings.sheet is None
        assert settings.value_input_option == "USER_ENTERED"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SHEETSDB_SPREADSHEET_ID", "abc")
        monkeypatch.setenv("SHEETSDB_SHEET", "Pets")
        monkeypatch.setenv("SHEETSDB_VALUE_INPUT_OPTION", "RAW")
        settings = get_settings()
        assert settings.spreadsheet_id == "abc"
        assert settings.sheet == "Pets"
        assert settings.value_input_option == "RAW"
        assert get_settings() is settings


class TestOpenSheet:
    """Test suite for open_sheet."""

    def test_wires_components(self):
        gc = Mock(spec=gspread.Client)
        settings = Settings(_env_file=None, spreadsheet_id="abc", sheet="Pets", value_input_option="RAW")

        sheet = sheetsdb.open_sheet(settings, gc=gc)

        assert sheet.sheet == "Pets"
        assert sheet.adapter.spreadsheet_id == "abc"
        assert sheet.adapter.value_input_option == "RAW"
        assert isinstance(sheet.adapter.transport, GspreadTransport)
        assert sheet.adapter.transport.gc is gc

    def test_sheet_override(self):
        settings = Settings(_env_file=None, spreadsheet_id="abc", sheet="Pets")
        sheet = sheetsdb.open_sheet(settings, gc=Mock(spec=gspread.Client), sheet=3)
        assert sheet.sheet == 3

    def test_service_account_from_credentials_file(self, monkeypatch):
        gc = Mock(spec=gspread.Client)
        service_account = Mock(return_value=gc)
        monkeypatch.setattr(gspread, "service_account", service_account)
        settings = Settings(_env_file=None, spreadsheet_id="abc", credentials_file="/tmp/sa.json")

        sheet = sheetsdb.open_sheet(settings)

        service_account.assert_called_once_with(filename="/tmp/sa.json")
        assert sheet.adapter.transport.gc is gc

    def test_requires_spreadsheet_id(self):
        with pytest.raises(InvalidArgumentError, match="spreadsheet id"):
            sheetsdb.open_sheet(Settings(_env_file=None, spreadsheet_id=""), gc=Mock(spec=gspread.Client))


def test_configure_logging_json():
    configure_logging(level="DEBUG", json_format=True)
    configure_logging(level="INFO")


def test_configure_logging_from_settings(monkeypatch, capsys):
    monkeypatch.setenv("SHEETSDB_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("SHEETSDB_LOG_FORMAT", "json")
    configure_logging()

    logger = structlog.get_logger()
    logger.info("hidden_event")
    logger.warning("shown_event", sheet="Pets")

    err = capsys.readouterr().err
    assert "hidden_event" not in err
    assert '"event": "shown_event"' in err
    assert '"sheet": "Pets"' in err
    configure_logging(level="INFO", json_format=False)
