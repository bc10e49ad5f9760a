"""
Pytest configuration and fixtures for cookbook-cli tests.
"""

import pytest
import pytest_asyncio

from .helpers import FakeChefServer, FakeCookbookSource, build_manifest, manifest_json


@pytest_asyncio.fixture
async def chef_server():
    """A local HTTP server playing the Chef server; tests register routes on it."""
    server = FakeChefServer()
    await server.start()
    yield server
    await server.close()


@pytest.fixture
def make_manifest_json():
    return manifest_json


@pytest.fixture
def make_manifest():
    return build_manifest


@pytest.fixture
def fake_source():
    return FakeCookbookSource
