"""Nobl9 user directory lookups."""
from __future__ import annotations
from typing import Optional

from .client import Deadline, Nobl9Client
from .exceptions import Nobl9Error

USERS_PATH = "/usrmgmt/v2/users"


class UserService:
    """Service for resolving Nobl9 users."""

    def __init__(self, client: Nobl9Client):
        """Initialize user service.

        Args:
            client: Nobl9 client with credentials set
        """
        self.client = client

    def get_user_by_email(self, email: str, deadline: Optional[Deadline] = None) -> Optional[dict]:
        """Return the user whose email matches, case-insensitively.

        Args:
            email: Email address to search for
            deadline: Shared request deadline

        Returns:
            User representation (with ``userId``) or None if not found

        Raises:
            Nobl9Error: On transport, HTTP or payload errors
        """
        resp = self.client.get(USERS_PATH, params={"phrase": email}, deadline=deadline)
        try:
            users = resp.json()
        except ValueError as exc:
            raise Nobl9Error(f"Unexpected response from {USERS_PATH}: body is not JSON ({exc})") from exc
        if isinstance(users, dict):
            users = users.get("users") or []
        if not isinstance(users, list):
            raise Nobl9Error(f"Unexpected response from {USERS_PATH}: expected a list of users")

        wanted = email.casefold()
        for user in users:
            if isinstance(user, dict) and str(user.get("email", "")).casefold() == wanted:
                if not user.get("userId"):
                    raise Nobl9Error(f"User '{email}' has no userId in directory response")
                return user
        return None
