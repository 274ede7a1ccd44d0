"""Low-level HTTP client for the Nobl9 API.

Handles authentication, token management, deadlines, and HTTP operations.
"""
from __future__ import annotations
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from .exceptions import Nobl9APIError, Nobl9AuthenticationError, Nobl9Error, Nobl9TimeoutError

DEFAULT_API_URL = "https://app.nobl9.com/api"
DEFAULT_OKTA_ORG_URL = "https://accounts.nobl9.com"
DEFAULT_OKTA_AUTH_SERVER = "auseg9kiegWKEtJZC416"
REQUEST_TIMEOUT = 60

# Refresh tokens this many seconds before they expire
TOKEN_REFRESH_LEEWAY = 10

logger = logging.getLogger(__name__)


class Deadline:
    """Point in time shared by every outbound call of one request.

    Usage:
        deadline = Deadline(60)
        requests.get(url, timeout=deadline.remaining())
    """

    def __init__(self, seconds: float = REQUEST_TIMEOUT, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        """Return seconds left before the deadline.

        Raises:
            Nobl9TimeoutError: If the deadline has already passed
        """
        left = self.expires_at - self._clock()
        if left <= 0:
            raise Nobl9TimeoutError(f"Request deadline of {self.seconds:g}s exceeded")
        return left

    @property
    def expired(self) -> bool:
        return self._clock() >= self.expires_at


class Nobl9Client:
    """HTTP client for the Nobl9 API with automatic token management.

    Features:
    - Client-credentials token from the Nobl9 Okta authorization server
    - Automatic token refresh when expired
    - Per-call timeout derived from a shared request Deadline
    - Centralized error handling

    Usage:
        client = Nobl9Client("https://app.nobl9.com/api")
        client.set_credentials("client-id", "client-secret")
        response = client.get("/usrmgmt/v2/users", params={"phrase": "alice@example.com"})
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        okta_org_url: Optional[str] = None,
        okta_auth_server: Optional[str] = None,
        organization: str = "",
        verify: bool = True,
    ):
        """Initialize Nobl9 client.

        Args:
            base_url: Nobl9 API base URL
            okta_org_url: Okta organization URL issuing access tokens
            okta_auth_server: Okta authorization server ID
            organization: Nobl9 organization sent in the Organization header
            verify: Verify TLS certificates on outbound calls
        """
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self.okta_org_url = (okta_org_url or DEFAULT_OKTA_ORG_URL).rstrip("/")
        self.okta_auth_server = okta_auth_server or DEFAULT_OKTA_AUTH_SERVER
        self.organization = organization
        self.verify = verify
        self._client_id: Optional[str] = None
        self._client_secret: Optional[str] = None
        self._token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @classmethod
    def from_config(cls, cfg) -> "Nobl9Client":
        """Create a client from an AppConfig, credentials included."""
        client = cls(
            base_url=cfg.api_url,
            okta_org_url=cfg.okta_org_url,
            okta_auth_server=cfg.okta_auth_server,
            organization=cfg.organization,
            verify=not cfg.skip_tls_verify,
        )
        client.set_credentials(cfg.client_id, cfg.client_secret)
        return client

    @property
    def token_url(self) -> str:
        return f"{self.okta_org_url}/oauth2/{self.okta_auth_server}/v1/token"

    def set_credentials(self, client_id: str, client_secret: str) -> None:
        """Store client credentials; the token is fetched on first use."""
        self._client_id = client_id
        self._client_secret = client_secret
        self._token = None
        self._token_expires_at = 0.0

    def _ensure_authenticated(self, deadline: Optional[Deadline]) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._client_id or not self._client_secret:
            raise Nobl9AuthenticationError(401, "Not authenticated - call set_credentials first", "")

        if self._token and time.monotonic() < self._token_expires_at - TOKEN_REFRESH_LEEWAY:
            return

        payload = self._get_access_token(self._client_id, self._client_secret, deadline)
        self._token = payload["access_token"]
        try:
            expires_in = float(payload.get("expires_in", 60))
        except (TypeError, ValueError):
            expires_in = 0.0
        self._token_expires_at = time.monotonic() + expires_in

    def _get_access_token(self, client_id: str, client_secret: str, deadline: Optional[Deadline]) -> Dict[str, Any]:
        """Fetch an access token using the client credentials flow."""
        data = {"grant_type": "client_credentials", "scope": "m2m"}
        try:
            resp = requests.post(
                self.token_url,
                data=data,
                auth=(client_id, client_secret),
                headers={"Accept": "application/json"},
                timeout=self._timeout(deadline),
                verify=self.verify,
            )
        except requests.Timeout as exc:
            raise Nobl9TimeoutError(f"Timed out requesting access token: {exc}") from exc
        except requests.RequestException as exc:
            raise Nobl9Error(f"Failed to request access token: {exc}") from exc

        if resp.status_code != 200:
            raise Nobl9AuthenticationError(resp.status_code, resp.text, self.token_url)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise Nobl9AuthenticationError(resp.status_code, f"Token response is not JSON: {exc}", self.token_url) from exc
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise Nobl9AuthenticationError(resp.status_code, "Token response has no access_token", self.token_url)
        return payload

    def get(self, path: str, params: Optional[Dict] = None, deadline: Optional[Deadline] = None) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/usrmgmt/v2/users")
            params: Query parameters
            deadline: Shared request deadline

        Returns:
            Response object

        Raises:
            Nobl9APIError: On HTTP error
            Nobl9TimeoutError: When the deadline expires
        """
        return self._request("GET", path, deadline, params=params)

    def put(self, path: str, json: Any = None, deadline: Optional[Deadline] = None) -> requests.Response:
        """Execute PUT request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/apply")
            json: JSON payload
            deadline: Shared request deadline

        Returns:
            Response object

        Raises:
            Nobl9APIError: On HTTP error
            Nobl9TimeoutError: When the deadline expires
        """
        return self._request("PUT", path, deadline, json=json)

    def _request(self, method: str, path: str, deadline: Optional[Deadline], **kwargs) -> requests.Response:
        self._ensure_authenticated(deadline)
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }
        if self.organization:
            headers["Organization"] = self.organization

        send = requests.get if method == "GET" else requests.put
        try:
            resp = send(url, headers=headers, timeout=self._timeout(deadline), verify=self.verify, **kwargs)
        except requests.Timeout as exc:
            raise Nobl9TimeoutError(f"{method} {url} timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise Nobl9Error(f"{method} {url} failed: {exc}") from exc

        self._handle_error(resp)
        return resp

    @staticmethod
    def _timeout(deadline: Optional[Deadline]) -> float:
        if deadline is None:
            return REQUEST_TIMEOUT
        return deadline.remaining()

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            Nobl9APIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise Nobl9APIError(resp.status_code, resp.text, resp.url)
