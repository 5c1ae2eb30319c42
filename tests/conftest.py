"""Shared pytest configuration and fixtures for sheetsdb tests."""

import pytest

from sheetsdb.documents import Sheet
from sheetsdb.grid import GridAdapter
from tests.helpers.fake_transport import FakeTransport


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. live Google Sheets)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test; pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def transport() -> FakeTransport:
    transport = FakeTransport()
    transport.add_sheet("Sheet1")
    return transport


@pytest.fixture
def pets_transport() -> FakeTransport:
    transport = FakeTransport()
    transport.add_sheet("Pets", values=[
        ["name", "age", "kind"],
        ["cat", "5", "feline"],
        ["car", "10", ""],
        ["dog", "2", "canine"],
    ])
    transport.add_sheet("Empty")
    return transport


@pytest.fixture
def adapter(transport) -> GridAdapter:
    return GridAdapter(transport, transport.spreadsheet_id)


@pytest.fixture
def pets_adapter(pets_transport) -> GridAdapter:
    return GridAdapter(pets_transport, pets_transport.spreadsheet_id)


@pytest.fixture
def sheet(adapter) -> Sheet:
    return Sheet(adapter)


@pytest.fixture
def pets(pets_adapter) -> Sheet:
    return Sheet(pets_adapter, sheet="Pets")
