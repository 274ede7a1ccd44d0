"""Tests for the Nobl9 HTTP client, user directory and apply services."""
import pytest
import requests

from app.core.nobl9 import (
    Deadline,
    Nobl9APIError,
    Nobl9AuthenticationError,
    Nobl9Client,
    Nobl9Error,
    Nobl9TimeoutError,
    ObjectService,
    UserService,
    project_manifest,
    role_binding_manifest,
)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def token_calls(monkeypatch, stub_response):
    calls = []

    def _post(url, *args, **kwargs):
        calls.append((url, kwargs))
        return stub_response({"access_token": f"token-{len(calls)}", "expires_in": 3600})

    monkeypatch.setattr(requests, "post", _post)
    return calls


@pytest.fixture
def nobl9_client():
    client = Nobl9Client(
        "https://nobl9.test/api/",
        okta_org_url="https://accounts.nobl9.test",
        okta_auth_server="srv",
        organization="acme",
    )
    client.set_credentials("id", "secret")
    return client


class TestDeadline:
    def test_remaining_counts_down(self):
        clock = FakeClock()
        deadline = Deadline(60, clock=clock)
        clock.now += 15
        assert deadline.remaining() == pytest.approx(45)
        assert not deadline.expired

    def test_expired_deadline_raises(self):
        clock = FakeClock()
        deadline = Deadline(60, clock=clock)
        clock.now += 60
        assert deadline.expired
        with pytest.raises(Nobl9TimeoutError, match="deadline of 60s exceeded"):
            deadline.remaining()


class TestNobl9Client:
    def test_token_requested_with_client_credentials(self, nobl9_client, token_calls, monkeypatch, stub_response):
        monkeypatch.setattr(requests, "get", lambda url, **kwargs: stub_response([]))

        nobl9_client.get("/usrmgmt/v2/users")

        url, kwargs = token_calls[0]
        assert url == "https://accounts.nobl9.test/oauth2/srv/v1/token"
        assert kwargs["auth"] == ("id", "secret")
        assert kwargs["data"] == {"grant_type": "client_credentials", "scope": "m2m"}

    def test_token_reused_until_expiry(self, nobl9_client, token_calls, monkeypatch, stub_response):
        monkeypatch.setattr(requests, "get", lambda url, **kwargs: stub_response([]))

        nobl9_client.get("/a")
        nobl9_client.get("/b")

        assert len(token_calls) == 1

    def test_headers_timeout_and_verify(self, nobl9_client, token_calls, monkeypatch, stub_response):
        seen = {}

        def _put(url, **kwargs):
            seen.update(kwargs, url=url)
            return stub_response(None)

        monkeypatch.setattr(requests, "put", _put)
        clock = FakeClock()
        deadline = Deadline(60, clock=clock)
        clock.now += 20

        nobl9_client.put("/apply", json=[{"kind": "Project"}], deadline=deadline)

        assert seen["url"] == "https://nobl9.test/api/apply"
        assert seen["headers"]["Authorization"] == "Bearer token-1"
        assert seen["headers"]["Organization"] == "acme"
        assert seen["timeout"] == pytest.approx(40)
        assert seen["verify"] is True
        assert seen["json"] == [{"kind": "Project"}]

    def test_tls_toggle_from_config(self, cfg):
        from dataclasses import replace

        assert Nobl9Client.from_config(cfg).verify is True
        assert Nobl9Client.from_config(replace(cfg, skip_tls_verify=True)).verify is False

    def test_organization_header_omitted_when_unset(self, token_calls, monkeypatch, stub_response):
        seen = {}
        monkeypatch.setattr(requests, "get", lambda url, **kwargs: seen.update(kwargs) or stub_response([]))
        client = Nobl9Client("https://nobl9.test/api")
        client.set_credentials("id", "secret")

        client.get("/usrmgmt/v2/users")

        assert "Organization" not in seen["headers"]

    def test_http_error_raises_api_error(self, nobl9_client, token_calls, monkeypatch, stub_response):
        monkeypatch.setattr(
            requests, "put",
            lambda url, **kwargs: stub_response({"error": "bad"}, status_code=400, url=url),
        )
        with pytest.raises(Nobl9APIError) as exc:
            nobl9_client.put("/apply", json=[])
        assert exc.value.status_code == 400
        assert exc.value.endpoint == "https://nobl9.test/api/apply"

    @pytest.mark.parametrize(
        "reply, detail",
        [
            ({"text": "<html>login</html>"}, "not JSON"),
            ({"payload": {"error": "x"}}, "no access_token"),
            ({"payload": ["token"]}, "no access_token"),
        ],
    )
    def test_unusable_token_reply_raises_authentication_error(self, nobl9_client, monkeypatch, stub_response, reply, detail):
        monkeypatch.setattr(requests, "post", lambda url, **kwargs: stub_response(**reply))
        with pytest.raises(Nobl9AuthenticationError, match=detail):
            nobl9_client.get("/usrmgmt/v2/users")

    def test_token_failure_raises_authentication_error(self, nobl9_client, monkeypatch, stub_response):
        monkeypatch.setattr(requests, "post", lambda url, **kwargs: stub_response({"error": "invalid_client"}, 401))
        with pytest.raises(Nobl9AuthenticationError):
            nobl9_client.get("/usrmgmt/v2/users")

    def test_missing_credentials_raise(self):
        with pytest.raises(Nobl9AuthenticationError, match="Not authenticated"):
            Nobl9Client().get("/usrmgmt/v2/users")

    def test_transport_timeout_becomes_timeout_error(self, nobl9_client, token_calls, monkeypatch):
        def _get(url, **kwargs):
            raise requests.ReadTimeout("read timed out")

        monkeypatch.setattr(requests, "get", _get)
        with pytest.raises(Nobl9TimeoutError, match="timed out"):
            nobl9_client.get("/usrmgmt/v2/users")

    def test_connection_error_becomes_nobl9_error(self, nobl9_client, token_calls, monkeypatch):
        def _get(url, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(requests, "get", _get)
        with pytest.raises(Nobl9Error, match="connection refused"):
            nobl9_client.get("/usrmgmt/v2/users")

    def test_expired_deadline_skips_http_call(self, nobl9_client, token_calls):
        clock = FakeClock()
        deadline = Deadline(1, clock=clock)
        clock.now += 5
        with pytest.raises(Nobl9TimeoutError):
            nobl9_client.get("/usrmgmt/v2/users", deadline=deadline)
        assert token_calls == []


class TestUserService:
    @pytest.fixture
    def users(self, nobl9_client, token_calls, monkeypatch, stub_response):
        directory = [
            {"userId": "00u1", "email": "Alice@Example.com", "firstName": "Alice"},
            {"userId": "00u2", "email": "alice@example.com.au"},
        ]
        params = []

        def _get(url, **kwargs):
            params.append(kwargs["params"])
            return stub_response(directory)

        monkeypatch.setattr(requests, "get", _get)
        return UserService(nobl9_client), params

    def test_exact_email_match_case_insensitive(self, users):
        service, params = users
        user = service.get_user_by_email("alice@example.com")
        assert user["userId"] == "00u1"
        assert params == [{"phrase": "alice@example.com"}]

    def test_no_match_returns_none(self, users):
        service, _ = users
        assert service.get_user_by_email("bob@example.com") is None

    def test_non_json_reply_raises(self, nobl9_client, token_calls, monkeypatch, stub_response):
        monkeypatch.setattr(requests, "get", lambda url, **kwargs: stub_response(text="<html>proxy</html>"))
        with pytest.raises(Nobl9Error, match="not JSON"):
            UserService(nobl9_client).get_user_by_email("a@b.com")

    def test_unexpected_payload_raises(self, nobl9_client, token_calls, monkeypatch, stub_response):
        monkeypatch.setattr(requests, "get", lambda url, **kwargs: stub_response("oops"))
        with pytest.raises(Nobl9Error, match="expected a list of users"):
            UserService(nobl9_client).get_user_by_email("a@b.com")


class TestObjectService:
    def test_apply_sends_all_objects_in_one_put(self, nobl9_client, token_calls, monkeypatch, stub_response):
        puts = []
        monkeypatch.setattr(requests, "put", lambda url, **kwargs: puts.append((url, kwargs)) or stub_response(None))
        objects = [
            project_manifest("demo", "Demo"),
            role_binding_manifest("assign-demo-u1-g0-1", "project-owner", "demo", user="u1"),
        ]

        ObjectService(nobl9_client).apply(objects)

        assert len(puts) == 1
        assert puts[0][0] == "https://nobl9.test/api/apply"
        assert puts[0][1]["json"] == objects


def test_role_binding_manifest_without_user():
    manifest = role_binding_manifest("rb", "project-viewer", "demo")
    assert manifest["spec"] == {"roleRef": "project-viewer", "projectRef": "demo"}
    assert manifest["kind"] == "RoleBinding"
