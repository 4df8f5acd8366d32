"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so libs/ is importable (matches CI PYTHONPATH config)
# This must happen before importing from app/ which imports from libs/
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from contextlib import asynccontextmanager  # noqa: E402
from typing import Any, Dict, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.core.config import settings  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests."""
    yield


# Keep startup logging out of test output for tests that import the
# singleton app directly.
app.router.lifespan_context = _test_lifespan


def create_test_application():
    """Create a fresh app instance with the lifespan disabled.

    Use this instead of the singleton when a test needs settings applied at
    construction time (e.g. REQUEST_LOGGING_ENABLED).
    """
    from app.main import create_application

    test_app = create_application()
    test_app.router.lifespan_context = _test_lifespan
    return test_app


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client for the singleton app.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def rci_url() -> str:
    """URL of the RCI calculation endpoint."""
    return f"{settings.API_V1_PREFIX}/rci/calculate"


@pytest.fixture
def example_payload() -> Dict[str, Any]:
    """
    A non-significant change: x1=25, x2=18, SD=8.5, r=0.88 gives RCI ≈ -1.68.
    """
    return {
        "pre_score": 25,
        "post_score": 18,
        "standard_deviation": 8.5,
        "reliability": 0.88,
    }


@pytest.fixture
def significant_payload() -> Dict[str, Any]:
    """
    A reliable improvement: x1=25, x2=10, SD=8.5, r=0.88 gives RCI ≈ -3.60.
    """
    return {
        "pre_score": 25,
        "post_score": 10,
        "standard_deviation": 8.5,
        "reliability": 0.88,
    }
