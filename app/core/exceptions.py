"""Provisioning outcomes that are reported back to the caller.

Every class carries a human-readable ``message`` and a ``kind`` used by the
response layer and the logs. None of them is allowed to escape as a crash.
"""
from __future__ import annotations
from typing import Optional


class ProvisioningError(Exception):
    """Base exception for all reportable provisioning failures."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedRequestError(ProvisioningError):
    """Request body could not be parsed into a CreateProjectRequest."""

    kind = "malformed"


class ValidationError(ProvisioningError):
    """Request is well-formed but violates a validation rule.

    Attributes:
        group_index: Index of the offending user group, if any
        token: Offending user token, if any
    """

    kind = "validation"

    def __init__(self, message: str, group_index: Optional[int] = None, token: Optional[str] = None):
        self.group_index = group_index
        self.token = token
        super().__init__(message)


class ConfigurationError(ProvisioningError):
    """Nobl9 client credentials are missing."""

    kind = "configuration"


class ResolutionFailedError(ProvisioningError):
    """One or more user emails could not be resolved to a Nobl9 user ID.

    Attributes:
        errors: Every ResolutionError collected for the request
    """

    kind = "resolution"

    def __init__(self, project_name: str, errors: list):
        self.project_name = project_name
        self.errors = list(errors)
        lines = "\n• ".join(error.message for error in self.errors)
        super().__init__(
            f"Failed to create project '{project_name}' because some users could not be found:\n• {lines}"
        )


class ProjectAlreadyExistsError(ProvisioningError):
    """Apply was rejected because the project already exists."""

    kind = "conflict"

    def __init__(self, project_name: str):
        self.project_name = project_name
        super().__init__(f"Project '{project_name}' already exists")


class StoreError(ProvisioningError):
    """Any other failure of the batched apply call."""

    kind = "store"
