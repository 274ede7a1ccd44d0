"""Pytest shared fixtures."""
import json
import os
import pathlib
import sys

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Configure test environment BEFORE any app imports: never pick up real credentials
for _var in ("NOBL9_SDK_CLIENT_ID", "NOBL9_SDK_CLIENT_SECRET", "NOBL9_SDK_ORGANIZATION", "NOBL9_SKIP_TLS_VERIFY"):
    os.environ.pop(_var, None)

import pytest
import requests

from app.config import AppConfig
from app.flask_app import create_app


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code: int = 200, url: str = "http://stub", text: str = None):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None and self.text:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


@pytest.fixture()
def stub_response():
    """The StubResponse class, for tests that stub requests functions."""
    return StubResponse


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting the live Nobl9 API.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _unexpected(method):
        def _call(url, *args, **kwargs):
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        return _call

    monkeypatch.setattr(requests, "get", _unexpected("GET"))
    monkeypatch.setattr(requests, "post", _unexpected("POST"))
    monkeypatch.setattr(requests, "put", _unexpected("PUT"))


# ─────────────────────────────────────────────────────────────────────────────
# Configuration and Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def cfg():
    """Configuration with credentials and a test API URL."""
    return AppConfig(
        client_id="test-client",
        client_secret="test-secret",
        api_url="https://nobl9.test/api",
        okta_org_url="https://accounts.nobl9.test",
        okta_auth_server="test-auth-server",
        organization="test-org",
    )


@pytest.fixture()
def flask_app(cfg):
    app = create_app(cfg)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(flask_app):
    """Flask test client with network access blocked."""
    with flask_app.test_client() as client:
        yield client
