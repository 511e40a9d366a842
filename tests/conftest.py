"""
Shared fixtures for route tests.

Each test gets its own app built from an explicit config and a fresh
in-memory session store, so nothing leaks between tests or from the
environment.
"""

import pytest
from fastapi.testclient import TestClient

from app.auth.session import InMemorySessionStore, SessionCookie
from app.core.config import AppConfig
from app.main import create_app


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        server_root="http://api.test",
        frontend_root="http://frontend.test",
        composio_api_key="composio-key",
        openai_api_key="openai-key",
        google_client_id="client-id",
        google_client_secret="client-secret",
        session_secret="test-secret",
        summary_timezone="UTC",
    )


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def app(config, session_store):
    return create_app(config=config, session_store=session_store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def login(client, config, session_store):
    """Store tokens under a new session and attach its signed cookie to the client."""

    def _login(tokens=None) -> str:
        cookie = SessionCookie(secret=config.session_secret, max_age=config.session_max_age)
        session_id = cookie.new_session_id()
        session_store.set(session_id, {"tokens": tokens or {"access_token": "user-access-token"}})
        client.cookies.set(config.session_cookie_name, cookie.dumps(session_id))
        return session_id

    return _login
