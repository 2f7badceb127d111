"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests (no I/O)
    │   ├── mindwell_auth/     # Credential engine (bcrypt, JWT)
    │   ├── domain/            # User aggregate and value objects
    │   ├── identity/          # Session records
    │   ├── infrastructure/    # Secret stores, email
    │   ├── application/       # Application services with mocked collaborators
    │   └── presentation/      # Request validation schemas
    └── integration/           # In-memory SQLite + in-memory secret store
        ├── persistence/
        └── api/               # HTTP tests through FastAPI's TestClient

Environment Variables:
    RUN_REDIS=1          Run @pytest.mark.redis tests against REDIS_URL
"""

import os

import pytest

from mindwell_config import clear_settings_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "redis: Tests that need a running Redis server (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip Redis tests unless explicitly enabled."""
    if os.environ.get("RUN_REDIS", "").lower() in ("1", "true", "yes"):
        return

    skip_redis = pytest.mark.skip(reason="Redis test - run with RUN_REDIS=1")
    for item in items:
        if "redis" in {mark.name for mark in item.iter_markers()}:
            item.add_marker(skip_redis)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Never leak cached settings between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
