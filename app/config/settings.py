"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from app.core.nobl9.client import (
    DEFAULT_API_URL,
    DEFAULT_OKTA_AUTH_SERVER,
    DEFAULT_OKTA_ORG_URL,
    REQUEST_TIMEOUT,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 4000
DEFAULT_REQUEST_TIMEOUT = float(REQUEST_TIMEOUT)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as exc:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, exc)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


def _env_flag(var_name: str, default: str = "false") -> bool:
    return os.environ.get(var_name, default).strip().lower() == "true"


def _env_number(var_name: str, default, cast):
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {var_name} must be a number, got '{raw}'.") from None
    if value <= 0:
        raise RuntimeError(f"Environment variable {var_name} must be positive, got '{raw}'.")
    return value


@dataclass(frozen=True)
class AppConfig:
    """Application configuration container."""
    # HTTP
    port: int = DEFAULT_PORT

    # Nobl9 client
    client_id: str = ""
    client_secret: str = ""
    api_url: str = DEFAULT_API_URL
    okta_org_url: str = DEFAULT_OKTA_ORG_URL
    okta_auth_server: str = DEFAULT_OKTA_AUTH_SERVER
    organization: str = ""
    skip_tls_verify: bool = False

    # Shared deadline for every outbound call of one request (seconds)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def has_credentials(self) -> bool:
        """True when both Nobl9 client credentials are configured."""
        return bool(self.client_id and self.client_secret)


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets.

    Missing credentials are not an error here: they are reported per request,
    so the service can start and answer health checks without them.
    """
    port = _env_number("PORT", DEFAULT_PORT, int)
    request_timeout = _env_number("NOBL9_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float)

    client_id = os.environ.get("NOBL9_SDK_CLIENT_ID", "").strip()
    client_secret = _load_secret_from_file("nobl9_sdk_client_secret", "NOBL9_SDK_CLIENT_SECRET") or ""

    cfg = AppConfig(
        port=port,
        client_id=client_id,
        client_secret=client_secret,
        api_url=os.environ.get("NOBL9_SDK_URL", DEFAULT_API_URL).rstrip("/"),
        okta_org_url=os.environ.get("NOBL9_SDK_OKTA_ORG_URL", DEFAULT_OKTA_ORG_URL).rstrip("/"),
        okta_auth_server=os.environ.get("NOBL9_SDK_OKTA_AUTH_SERVER", DEFAULT_OKTA_AUTH_SERVER),
        organization=os.environ.get("NOBL9_SDK_ORGANIZATION", "").strip(),
        skip_tls_verify=_env_flag("NOBL9_SKIP_TLS_VERIFY"),
        request_timeout=request_timeout,
    )

    logger.info(
        "Settings loaded: api_url=%s, client_id=%s, secret=%s, port=%d",
        cfg.api_url,
        cfg.client_id or "EMPTY",
        "***" if cfg.client_secret else "EMPTY",
        cfg.port,
    )
    return cfg
