"""Input validation helpers for create-project requests."""
from __future__ import annotations
import re

from app.core.exceptions import ValidationError
from app.core.models import CreateProjectRequest
from app.core.roles import all_roles, is_valid_role

USER_ID_MIN_LENGTH = 2

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Substrings that signal an email was intended even without an '@'
COMMON_EMAIL_DOMAINS = (".com", ".org", ".net", ".edu", ".gov", ".co.", ".io", ".dev")


def looks_like_email(token: str) -> bool:
    """Return True if token appears to be intended as an email address.

    This only decides which validation rule applies; a token such as
    ``alice.example.com`` looks like an email but fails ``validate_email``.
    """
    if "@" in token:
        return True
    return any(domain in token for domain in COMMON_EMAIL_DOMAINS)


def validate_email(email: str) -> bool:
    """Strict check for ``local-part@domain.tld`` with an alphabetic TLD."""
    return EMAIL_PATTERN.match(email) is not None


def validate_user_identifier(token: str, group_index: int) -> None:
    """Validate a single user token from a user group.

    Args:
        token: Trimmed, non-empty user token (email or Nobl9 user ID)
        group_index: Index of the enclosing group, for error messages

    Raises:
        ValidationError: If the token is a malformed email or a too-short user ID
    """
    if looks_like_email(token):
        if not validate_email(token):
            raise ValidationError(
                f"Invalid email format: '{token}' in group {group_index}. "
                "Email addresses must contain @ symbol and be properly formatted (e.g., user@domain.com).",
                group_index=group_index,
                token=token,
            )
        return

    if len(token) < USER_ID_MIN_LENGTH:
        raise ValidationError(
            f"Invalid user ID: '{token}' in group {group_index} (too short)",
            group_index=group_index,
            token=token,
        )


def validate_create_project_request(request: CreateProjectRequest) -> None:
    """Validate a create-project request, stopping at the first defect.

    Order: appID, user groups present, then for each group its role followed
    by each of its tokens. Empty tokens are skipped.

    Raises:
        ValidationError: For the first rule violated
    """
    if not request.app_id:
        raise ValidationError("Project name (appID) is required")

    if not request.user_groups:
        raise ValidationError("At least one user group is required")

    for group_index, group in enumerate(request.user_groups):
        if not is_valid_role(group.role):
            raise ValidationError(
                f"Invalid role '{group.role}' in group {group_index}. "
                f"Must be one of: {', '.join(all_roles())}",
                group_index=group_index,
            )

        for token in group.tokens():
            validate_user_identifier(token, group_index)
