"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, logging, and configuration.
"""
from __future__ import annotations
import logging
import os
from typing import Optional

from flask import Flask

from app.config import AppConfig, load_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[AppConfig] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Explicit configuration (defaults to load_settings())
    """
    _configure_logging()

    if cfg is None:
        cfg = load_settings()

    app = Flask(__name__)

    # Store config for easy access in routes
    app.config["APP_CONFIG"] = cfg

    # Register blueprints
    from app.api import errors, health, projects

    app.register_blueprint(health.bp)
    app.register_blueprint(projects.bp)

    # Register error handlers
    errors.register_error_handlers(app)

    if cfg.skip_tls_verify:
        logger.warning("SSL certificate verification is DISABLED (NOBL9_SKIP_TLS_VERIFY=true)")

    if not cfg.has_credentials:
        logger.warning(
            "Nobl9 credentials not configured; create-project requests will fail until "
            "NOBL9_SDK_CLIENT_ID and NOBL9_SDK_CLIENT_SECRET are set"
        )

    logger.info("Project API registered at /api/create-project (Nobl9 API: %s)", cfg.api_url)
    return app


def _configure_logging() -> None:
    """Configure root logging once; gunicorn and tests may already have done it."""
    root = logging.getLogger()
    if root.handlers:
        return
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


# ─────────────────────────────────────────────────────────────────────────────
# Application Instance (for Gunicorn)
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    port = app.config["APP_CONFIG"].port
    logger.info("Backend listening on port %s", port)
    app.run(host="0.0.0.0", port=port)
