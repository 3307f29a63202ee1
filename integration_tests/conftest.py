"""Pytest configuration for integration tests."""

import pytest
import pytest_asyncio

from liftbook.db import init_db


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest_asyncio.fixture
async def data_dir(tmp_path):
    """A data directory with an initialized database."""
    await init_db(tmp_path / "liftbook.db")
    return tmp_path
