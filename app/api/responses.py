"""Uniform ``{success, message}`` envelope for the project API."""
from __future__ import annotations
import logging

from flask import Response, jsonify

from app.core.exceptions import ProvisioningError
from app.core.models import ProvisioningResult

logger = logging.getLogger(__name__)


def respond(success: bool, message: str) -> Response:
    """Send the response envelope.

    The HTTP status is always 200; the outcome lives in ``success``. Only a
    failure to encode the envelope itself produces a 500.
    """
    try:
        response = jsonify({"success": success, "message": message})
    except (TypeError, ValueError) as exc:
        logger.error("Error encoding JSON response: %s", exc)
        return Response("Internal server error", status=500, mimetype="text/plain")

    if success:
        logger.info("SUCCESS: %s", message)
    else:
        logger.warning("ERROR: %s", message)

    response.status_code = 200
    return response


def report_result(result: ProvisioningResult) -> Response:
    return respond(True, result.message)


def report_error(error: ProvisioningError) -> Response:
    """Map a provisioning failure to a failed envelope."""
    logger.debug("Provisioning failed (%s)", error.kind)
    return respond(False, error.message)
