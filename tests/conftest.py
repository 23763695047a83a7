"""Pytest configuration and shared fixtures.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


ENDPOINT = "https://kv.example.test/v0/token"


@pytest.fixture
def transport():
    from kvclient_lib.transport.memory import MemoryTransport
    return MemoryTransport()


@pytest.fixture
def client(transport):
    from kvclient_lib.client import Client
    return Client(endpoint_url=ENDPOINT, transport=transport)


@pytest.fixture(params=["sync", "async"])
def mode(request):
    """Run a test once through the blocking and once through the awaitable methods."""
    return request.param
