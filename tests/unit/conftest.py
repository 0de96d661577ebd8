"""Shared fixtures for unit tests: uses the mock transport, no server needed."""

import pytest
import sys
import os

# Add project root to path so cloudapi is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from cloudapi.backends.mock.transport import MockTransport
from cloudapi.core.client import Client
from tests.unit.sample_documents import API_URL, ENTRY_POINT_XML


@pytest.fixture
def transport():
    mock = MockTransport()
    mock.add("GET", API_URL, ENTRY_POINT_XML)
    return mock


@pytest.fixture
def client(transport):
    return Client(API_URL, "mockuser", "mockpassword", transport=transport)
