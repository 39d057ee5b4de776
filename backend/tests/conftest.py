"""Shared test fixtures for the PageDrop test suite.

Provides:
- settings: Settings pointing at a temporary SQLite file and site root
- app: application built by create_app for those settings
- client: TestClient with the lifespan running (tables created)
- db_session: a session on the test database
- store: the app's SiteStore
- mock_fetch: swap outbound URL fetches for an httpx.MockTransport handler
- deploy_code: helper that publishes a code site and returns its ID
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from pagedrop.config import Settings
from pagedrop.main import create_app
from pagedrop.services.fetcher import UrlFetcher


@pytest.fixture
def settings(tmp_path):
    """Settings isolated to a per-test directory."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'pagedrop-test.db'}",
        sites_dir=str(tmp_path / "hosted-sites"),
        environment="testing",
        public_base_url=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs startup (create tables, storage root)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def store(app):
    return app.state.store


@pytest.fixture
def mock_fetch(app):
    """Install a request handler for outbound fetches.

    Usage: mock_fetch(lambda request: httpx.Response(200, text="..."))
    """

    def install(handler):
        app.state.fetcher = UrlFetcher(timeout=5.0, transport=httpx.MockTransport(handler))

    return install


@pytest.fixture
def deploy_code(client):
    """Publish inline code and return the new site ID."""

    def deploy(code="<h1>hi</h1>", filename=None, project_name=None):
        body = {"code": code}
        if filename is not None:
            body["filename"] = filename
        if project_name is not None:
            body["projectName"] = project_name
        resp = client.post("/api/deploy-code", json=body)
        assert resp.status_code == 200, resp.text
        return resp.json()["siteId"]

    return deploy
