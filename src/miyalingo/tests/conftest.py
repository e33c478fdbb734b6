"""Test configuration."""
import os
import tempfile
from datetime import UTC, datetime

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="miyalingo-test-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Import after environment setup
from miyalingo.config import ensure_directories


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    ensure_directories()
    yield


@pytest.fixture
def now() -> datetime:
    """A fixed point in time."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
