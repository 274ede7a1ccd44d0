"""Nobl9 object manifests and the batched apply operation."""
from __future__ import annotations
import logging
from typing import Optional

from .client import Deadline, Nobl9Client

logger = logging.getLogger(__name__)

API_VERSION = "n9/v1alpha"
APPLY_PATH = "/apply"


def project_manifest(name: str, description: str) -> dict:
    """Return a Project object."""
    return {
        "apiVersion": API_VERSION,
        "kind": "Project",
        "metadata": {"name": name},
        "spec": {"description": description},
    }


def role_binding_manifest(name: str, role_ref: str, project_ref: str, user: Optional[str] = None) -> dict:
    """Return a project-scoped RoleBinding object."""
    spec = {"roleRef": role_ref, "projectRef": project_ref}
    if user is not None:
        spec["user"] = user
    return {
        "apiVersion": API_VERSION,
        "kind": "RoleBinding",
        "metadata": {"name": name},
        "spec": spec,
    }


class ObjectService:
    """Service for applying Nobl9 objects."""

    def __init__(self, client: Nobl9Client):
        self.client = client

    def apply(self, objects: list[dict], deadline: Optional[Deadline] = None) -> None:
        """Apply every object in one call; the control plane handles the batch as a unit.

        Raises:
            Nobl9Error: On transport or HTTP errors
        """
        kinds = ", ".join(f"{obj['kind']}/{obj['metadata']['name']}" for obj in objects)
        logger.info("Applying %d objects: %s", len(objects), kinds)
        self.client.put(APPLY_PATH, json=objects, deadline=deadline)
