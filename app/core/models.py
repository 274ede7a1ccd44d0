"""Request and result types for project provisioning."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional

from app.core.exceptions import MalformedRequestError


def _field(payload: dict, name: str) -> Any:
    """Look up a JSON field case-insensitively (``userIds`` == ``userIDs``)."""
    if name in payload:
        return payload[name]
    lowered = name.lower()
    for key, value in payload.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _string_field(payload: dict, name: str) -> str:
    value = _field(payload, name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedRequestError(f"Invalid request body: field '{name}' must be a string")
    return value


@dataclass(frozen=True)
class UserGroup:
    """A comma-separated list of user tokens and the role granted to them."""
    user_ids: str
    role: str

    @classmethod
    def from_dict(cls, payload: Any) -> "UserGroup":
        if not isinstance(payload, dict):
            raise MalformedRequestError("Invalid request body: each user group must be a JSON object")
        return cls(
            user_ids=_string_field(payload, "userIDs"),
            role=_string_field(payload, "role"),
        )

    def tokens(self) -> list[str]:
        """Return trimmed, non-empty user tokens in request order."""
        return [token.strip() for token in self.user_ids.split(",") if token.strip()]


@dataclass(frozen=True)
class CreateProjectRequest:
    """Client request describing a project and the users to grant roles to."""
    app_id: str
    description: str = ""
    user_groups: list[UserGroup] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Any) -> "CreateProjectRequest":
        """Build a request from a decoded JSON body.

        Raises:
            MalformedRequestError: If the body is not an object or a field has the wrong type
        """
        if not isinstance(payload, dict):
            raise MalformedRequestError("Invalid request body: expected a JSON object")

        groups = _field(payload, "userGroups")
        if groups is None:
            groups = []
        if not isinstance(groups, list):
            raise MalformedRequestError("Invalid request body: field 'userGroups' must be a list")

        return cls(
            app_id=_string_field(payload, "appID"),
            description=_string_field(payload, "description"),
            user_groups=[UserGroup.from_dict(group) for group in groups],
        )


@dataclass(frozen=True)
class ResolvedBinding:
    """Role binding ready to be applied, with the user already resolved."""
    name: str
    user_id: Optional[str]
    role_ref: str
    project_ref: str


@dataclass(frozen=True)
class ResolutionError:
    """A user token that could not be resolved to a Nobl9 user ID."""
    token: str
    message: str


@dataclass(frozen=True)
class ProvisioningResult:
    """Outcome of a successful apply."""
    project_name: str
    bindings: list[ResolvedBinding] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Project '{self.project_name}' created successfully "
            f"with {len(self.bindings)} user role assignments"
        )
