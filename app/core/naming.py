"""RFC-1123 compliant name generation for role bindings."""
from __future__ import annotations
import re
import time
from typing import Optional

MAX_NAME_LENGTH = 63
MAX_COMPONENT_LENGTH = 20

_INVALID_CHARS = re.compile(r"[^a-z0-9-]+")


def sanitize_name(name: str) -> str:
    """Lowercase, collapse characters outside ``[a-z0-9-]`` to one hyphen, trim hyphens."""
    name = _INVALID_CHARS.sub("-", name.lower())
    return name.strip("-")


def truncate(name: str, max_len: int) -> str:
    """Return the first max_len characters of name."""
    if len(name) > max_len:
        return name[:max_len]
    return name


def build_role_binding_name(
    project_name: str,
    user_token: str,
    group_index: int,
    timestamp: Optional[int] = None,
) -> str:
    """Build ``assign-<project>-<user>-g<index>-<unix seconds>``.

    Project and user parts get up to 20 characters each. When the fixed part
    grows past its usual 22 characters (large group index), both budgets shrink
    so the name stays within 63 characters.

    Two calls in the same second with the same truncated project, user and
    group index produce the same name.
    """
    if timestamp is None:
        timestamp = int(time.time())

    project = sanitize_name(project_name)
    user = sanitize_name(user_token)
    if not (project.isascii() and user.isascii()):
        raise ValueError(f"Sanitized name components must be ASCII: {project!r}, {user!r}")

    suffix = f"g{group_index}-{timestamp}"
    overhead = len("assign-") + len("--") + len(suffix)
    budget = max(0, min(MAX_COMPONENT_LENGTH, (MAX_NAME_LENGTH - overhead) // 2))

    name = f"assign-{truncate(project, budget)}-{truncate(user, budget)}-{suffix}"
    if len(name) > MAX_NAME_LENGTH:
        name = name[:MAX_NAME_LENGTH].rstrip("-")
    return name
