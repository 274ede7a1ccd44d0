"""Project provisioning endpoint.

This module is a thin HTTP adapter: all business logic lives in
app.core.provisioning_service, and all responses go through app.api.responses.
"""
from __future__ import annotations
from flask import Blueprint, current_app, request
from werkzeug.exceptions import BadRequest

from app.api.responses import report_error, report_result, respond
from app.core import provisioning_service
from app.core.exceptions import ProvisioningError

bp = Blueprint("projects", __name__)


@bp.route("/api/create-project", methods=["POST"])
def create_project():
    """Create a Nobl9 project and assign roles to the requested users."""
    try:
        payload = request.get_json(force=True)
    except BadRequest as exc:
        return respond(False, f"Invalid request body: {exc.description}")

    cfg = current_app.config["APP_CONFIG"]
    try:
        result = provisioning_service.create_project(payload, cfg)
    except ProvisioningError as error:
        return report_error(error)

    return report_result(result)
