"""
Provisioning Service Layer: Project + RoleBinding creation

This module turns a create-project request into one Nobl9 Project and its
RoleBindings. It is used by both the Flask API and the command-line tool, so
validation, user resolution and error reporting behave the same everywhere.

Architecture:
    POST /api/create-project ──┐
                               ├──> provisioning_service.py ──> app.core.nobl9 ──> Nobl9
    scripts/create_project.py ─┘

Pipeline:
    1. Parse and validate the request (no network call before this is done)
    2. Check that Nobl9 credentials are configured
    3. Resolve every email to a Nobl9 user ID, collecting all failures
    4. Apply the project and every role binding in a single call
"""

from __future__ import annotations
import logging
import time
from typing import Any, Callable, Optional

from app.config import AppConfig
from app.core.exceptions import (
    ConfigurationError,
    ProjectAlreadyExistsError,
    ResolutionFailedError,
    StoreError,
)
from app.core.models import (
    CreateProjectRequest,
    ProvisioningResult,
    ResolutionError,
    ResolvedBinding,
)
from app.core.naming import build_role_binding_name
from app.core.nobl9 import (
    Deadline,
    Nobl9APIError,
    Nobl9Client,
    Nobl9Error,
    ObjectService,
    UserService,
    project_manifest,
    role_binding_manifest,
)
from app.core.validators import validate_create_project_request

logger = logging.getLogger(__name__)

CONFLICT_MARKERS = ("already exists", "conflict")


def default_description(app_id: str) -> str:
    return f"Project created via API: {app_id}"


def is_conflict(error: Nobl9Error) -> bool:
    """Return True if an apply failure means the project already exists."""
    if isinstance(error, Nobl9APIError) and error.status_code == 409:
        return True
    text = str(error).lower()
    return any(marker in text for marker in CONFLICT_MARKERS)


class ProjectProvisioner:
    """Resolves users and applies a project with its role bindings.

    Args:
        user_service: Directory used to resolve emails to user IDs
        object_service: Store receiving the batched apply
        clock: Source of Unix time for binding names, read once per binding
    """

    def __init__(
        self,
        user_service: UserService,
        object_service: ObjectService,
        clock: Callable[[], float] = time.time,
    ):
        self.user_service = user_service
        self.object_service = object_service
        self.clock = clock

    def provision(self, request: CreateProjectRequest, deadline: Deadline) -> ProvisioningResult:
        """Provision a validated request.

        Raises:
            ResolutionFailedError: If any email could not be resolved (nothing is applied)
            ProjectAlreadyExistsError: If the control plane reports a conflict
            StoreError: For any other apply failure
        """
        description = request.description or default_description(request.app_id)
        project = project_manifest(request.app_id, description)

        bindings: list[ResolvedBinding] = []
        errors: list[ResolutionError] = []

        for group_index, group in enumerate(request.user_groups):
            for token in group.tokens():
                user_id = self._resolve_user(token, deadline, errors)
                if user_id is None:
                    continue

                binding = ResolvedBinding(
                    name=build_role_binding_name(request.app_id, token, group_index, int(self.clock())),
                    user_id=user_id,
                    role_ref=group.role,
                    project_ref=request.app_id,
                )
                bindings.append(binding)
                logger.info(
                    "Prepared role binding %s for user %s with role %s",
                    binding.name, user_id, group.role,
                )

        # Nothing has been sent to the store yet, so there is nothing to undo
        if errors:
            raise ResolutionFailedError(request.app_id, errors)

        objects = [project] + [
            role_binding_manifest(b.name, b.role_ref, b.project_ref, user=b.user_id)
            for b in bindings
        ]
        try:
            self.object_service.apply(objects, deadline=deadline)
        except Nobl9Error as exc:
            if is_conflict(exc):
                raise ProjectAlreadyExistsError(request.app_id) from exc
            raise StoreError(f"Failed to create project and assign roles: {exc}") from exc

        logger.info(
            "Created project '%s' and applied %d role bindings",
            request.app_id, len(bindings),
        )
        return ProvisioningResult(project_name=request.app_id, bindings=bindings)

    def _resolve_user(self, token: str, deadline: Deadline, errors: list[ResolutionError]) -> Optional[str]:
        """Return the Nobl9 user ID for token, or record why it can't be resolved."""
        if "@" not in token:
            logger.info("Using provided user ID: %s", token)
            return token

        logger.info("Looking up user by email: %s", token)
        try:
            user = self.user_service.get_user_by_email(token, deadline=deadline)
        except Nobl9Error as exc:
            errors.append(ResolutionError(token, f"Error retrieving user '{token}': {exc}"))
            return None

        if user is None:
            errors.append(ResolutionError(token, f"User with email '{token}' not found in Nobl9"))
            return None

        user_id = user["userId"]
        logger.info("Found user: %s -> %s", token, user_id)
        return user_id


def create_project(
    payload: Any,
    cfg: AppConfig,
    client: Optional[Nobl9Client] = None,
    clock: Callable[[], float] = time.time,
) -> ProvisioningResult:
    """Run the whole create-project pipeline for a decoded JSON body.

    Args:
        payload: Decoded JSON request body
        cfg: Application configuration (credentials, URLs, timeout)
        client: Optional pre-built Nobl9 client (defaults to one built from cfg)
        clock: Source of Unix time for binding names

    Returns:
        ProvisioningResult describing the applied project and bindings

    Raises:
        ProvisioningError: Any reportable failure (see app.core.exceptions)
    """
    request = CreateProjectRequest.from_dict(payload)
    validate_create_project_request(request)

    if not cfg.has_credentials:
        raise ConfigurationError(
            "Missing Nobl9 credentials. Set NOBL9_SDK_CLIENT_ID and NOBL9_SDK_CLIENT_SECRET environment variables."
        )

    deadline = Deadline(cfg.request_timeout)
    if client is None:
        client = Nobl9Client.from_config(cfg)

    provisioner = ProjectProvisioner(UserService(client), ObjectService(client), clock=clock)
    return provisioner.provision(request, deadline)
