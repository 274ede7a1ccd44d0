"""Nobl9 API client library.

This package provides a small, testable interface to the Nobl9 API.

Architecture:
- client.py: HTTP client with authentication, auto-refresh and deadlines
- users.py: User directory lookups (email -> user ID)
- objects.py: Project/RoleBinding manifests and the batched apply call
- exceptions.py: Typed exceptions for error handling

Usage:
    from app.core.nobl9 import Nobl9Client, UserService, ObjectService

    client = Nobl9Client("https://app.nobl9.com/api")
    client.set_credentials("client-id", "client-secret")

    user = UserService(client).get_user_by_email("alice@example.com")
    ObjectService(client).apply([project_manifest("demo", "Demo project")])
"""
from .client import (
    Deadline,
    Nobl9Client,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    Nobl9Error,
    Nobl9APIError,
    Nobl9AuthenticationError,
    Nobl9TimeoutError,
)
from .objects import (
    ObjectService,
    project_manifest,
    role_binding_manifest,
)
from .users import UserService

__all__ = [
    # Client
    "Deadline",
    "Nobl9Client",
    "REQUEST_TIMEOUT",

    # Exceptions
    "Nobl9Error",
    "Nobl9APIError",
    "Nobl9AuthenticationError",
    "Nobl9TimeoutError",

    # Services
    "ObjectService",
    "UserService",

    # Manifests
    "project_manifest",
    "role_binding_manifest",
]
