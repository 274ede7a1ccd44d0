"""Catalog of project roles that may be granted through a role binding."""
from __future__ import annotations

VALID_ROLES: frozenset[str] = frozenset({
    "project-owner",
    "project-viewer",
    "project-editor",
})


def is_valid_role(role: str) -> bool:
    """Return True if role can be assigned in a project role binding."""
    return role in VALID_ROLES


def all_roles() -> list[str]:
    """Return the assignable roles, sorted, for error messages."""
    return sorted(VALID_ROLES)
