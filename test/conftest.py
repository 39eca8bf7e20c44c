"""
Test Configuration and Fixtures

- Environment setup (log directory) before any app import
- HTTP client for the test application, with a fresh container per test

Architecture:
- Unit tests build use cases and adapters directly with a fake clock
- API tests go through FastAPI with the in-memory adapters wired by the container
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the logger read the environment at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from test.test_main import app  # noqa: E402


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    container.reset_singletons()
    with TestClient(app) as test_client:
        yield test_client
    container.reset_singletons()
