"""E2E test fixtures: a mock cloud API server on a real socket."""

from __future__ import annotations

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from cloudapi.backends.http.transport import RequestsTransport
from cloudapi.backends.mock.driver import MockDriver
from tests.e2e.mock_api import PASSWORD, USERNAME, MockAPIServer


@pytest.fixture
def driver():
    mock = MockDriver()
    mock.put_image({"id": "img1", "name": "Fedora 10", "owner_id": "fedoraproject", "architecture": "x86_64"})
    mock.put_image({"id": "img2", "name": "JBoss", "owner_id": "mockuser", "architecture": "i386"})
    mock.put_realm({"id": "us", "name": "United States", "state": "AVAILABLE"})
    mock.put_hardware_profile(
        {
            "id": "m1-small",
            "name": "m1-small",
            "properties": [
                {"name": "cpu", "kind": "fixed", "unit": "count", "value": 1},
                {"name": "memory", "kind": "range", "unit": "MB", "value": 1740.8, "first": 1740.8, "last": 4096},
                {"name": "storage", "kind": "enum", "unit": "GB", "value": 160, "options": [160, 320]},
                {"name": "architecture", "kind": "fixed", "unit": "label", "value": "i386"},
            ],
        }
    )
    return mock


@pytest.fixture
def mock_api(driver):
    """Start a mock API server on a random port."""
    server = MockAPIServer(driver)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def transport():
    http = RequestsTransport(timeout=5)
    yield http
    http.close()


@pytest.fixture
def credentials():
    return USERNAME, PASSWORD
