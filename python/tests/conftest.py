"""Pytest configuration and fixtures for corsgate tests.

Test isolation strategy:
- Settings cache is cleared around every test so env overrides never leak
- Middleware tests wrap a throwaway downstream ASGI app (see tests.helpers)
- Integration tests use Starlette's TestClient against the wrapped app
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

# Add repo root to sys.path for importing top-level packages (e.g., apps)
_repo_root = Path(__file__).parent.parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import pytest
from starlette.testclient import TestClient

from corsgate.config import clear_settings_cache
from corsgate.middleware.cors import CORSMiddleware
from corsgate.policy import CORSPolicy
from tests.helpers import make_downstream


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Clear cached settings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def cors_client() -> Callable[..., TestClient]:
    """Factory for a TestClient in front of CORSMiddleware.

    Usage:
        client = cors_client(CORSPolicy(max_age=3500), status_code=418)
    """

    def factory(
        policy: CORSPolicy | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> TestClient:
        downstream = make_downstream(status_code=status_code, headers=headers)
        return TestClient(CORSMiddleware(downstream, policy=policy))

    return factory
