"""
Shared test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during tests; tests control config through constructor arguments or
monkeypatch.setenv(). Service tests get a ``backend`` of in-memory fakes,
route tests an ``api`` TestClient wired to the same fakes.
"""

import os

import pytest
from fastapi.testclient import TestClient

from app import create_app
from dependencies import (
    get_comment_repo,
    get_follow_repo,
    get_option_repo,
    get_password_reset_repo,
    get_pending_repo,
    get_post_repo,
    get_profile_like_repo,
    get_refresh_token_repo,
    get_subscription_repo,
    get_user_repo,
    get_vote_repo,
)
from tests.fakes import Backend

# Ensure a MONGODB_URI is present so AppSettings can be instantiated
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def api(backend):
    """TestClient over the real app with every repository replaced by a fake.

    The lifespan is not entered, so no MongoDB, HTTP or Firebase client is
    created; the providers it would build are set on app.state directly.
    """
    app = create_app(backend.settings)
    app.state.db = None
    app.state.mongo_client = None
    app.state.email_provider = backend.email
    app.state.storage = backend.storage
    app.state.identity_provider = backend.identity

    app.dependency_overrides.update(
        {
            get_user_repo: lambda: backend.users,
            get_pending_repo: lambda: backend.pending,
            get_refresh_token_repo: lambda: backend.refresh_tokens,
            get_password_reset_repo: lambda: backend.password_resets,
            get_post_repo: lambda: backend.posts,
            get_option_repo: lambda: backend.options,
            get_vote_repo: lambda: backend.votes,
            get_comment_repo: lambda: backend.comments,
            get_follow_repo: lambda: backend.follows,
            get_profile_like_repo: lambda: backend.likes,
            get_subscription_repo: lambda: backend.subscriptions,
        }
    )
    return TestClient(app, raise_server_exceptions=False)
