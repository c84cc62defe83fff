"""Shared pytest fixtures and configuration."""

import os
import pytest
from contextlib import ExitStack
from unittest.mock import MagicMock, patch

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("LOG_FORMAT", "text")

from tests.utils.fake_supabase import FakeSupabase
from tests.utils.fake_realtime import FakeChangeFeed

# Every module that opens ``async with SupabaseClient()``
SUPABASE_CLIENT_USERS = (
    "idrhub.services.favorites",
    "idrhub.services.properties",
    "idrhub.services.agents",
    "idrhub.services.analytics",
    "idrhub.services.messages",
    "idrhub.services.auth",
)


@pytest.fixture
def fake_db():
    """Empty in-memory database; seed with ``fake_db.tables[...] = [...]``."""
    return FakeSupabase()


@pytest.fixture
def supabase(fake_db):
    """Route every SupabaseClient context manager to ``fake_db``."""
    with ExitStack() as stack:
        for module in SUPABASE_CLIENT_USERS:
            mock_client_class = stack.enter_context(patch(f"{module}.SupabaseClient"))
            mock_client_class.return_value.__aenter__.return_value = fake_db
            mock_client_class.return_value.__aexit__.return_value = None
        yield fake_db


@pytest.fixture
def change_feed():
    return FakeChangeFeed()


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for tests that only need call assertions."""
    client = MagicMock()
    client.table = MagicMock(return_value=MagicMock())
    return client


@pytest.fixture
def viewer_factory():
    from idrhub.models.user import Viewer

    def _make(role: str = "buyer", user_id: str = "11111111-1111-1111-1111-111111111111", **kwargs):
        return Viewer(id=user_id, role=role, full_name=kwargs.pop("full_name", "Test User"), **kwargs)

    return _make


@pytest.fixture
def local_storage(tmp_path):
    from idrhub.services.local_storage import LocalStorage
    return LocalStorage(str(tmp_path / "local_storage.json"))
