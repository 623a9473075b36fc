"""
Role-based permission utilities for organization users.

Roles are stored as upper-case strings on the user row. The groups below are
the single source of truth for who may manage the organization, who may write
dashboard data and which roles an administrator may hand out.
"""

from typing import FrozenSet, Optional, Set
from enum import Enum


ROLE_SUPER_ADMIN = "SUPER_ADMIN"
ROLE_ADMIN = "ADMIN"
ROLE_ORGANIZER = "ORGANIZER"
ROLE_REVIEWER = "REVIEWER"
ROLE_SUBMITTER = "SUBMITTER"

ALLOWED_ROLES = {ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_ORGANIZER, ROLE_REVIEWER, ROLE_SUBMITTER}

# Derived role groups
MANAGE_ROLES: FrozenSet[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN})
WRITE_ROLES: FrozenSet[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_ORGANIZER})
# Roles that only see events they were assigned to, read-only
RESTRICTED_ROLES: FrozenSet[str] = frozenset({ROLE_REVIEWER, ROLE_SUBMITTER})
# Roles that may score abstracts and set their review status
REVIEW_ROLES: FrozenSet[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_REVIEWER})
# Roles an administrator may assign through the users screen
INVITABLE_ROLES: FrozenSet[str] = frozenset({ROLE_ADMIN, ROLE_ORGANIZER, ROLE_REVIEWER})


class UserRole(str, Enum):
    """Enum for user roles used in schemas and validation."""
    SUPER_ADMIN = ROLE_SUPER_ADMIN
    ADMIN = ROLE_ADMIN
    ORGANIZER = ROLE_ORGANIZER
    REVIEWER = ROLE_REVIEWER
    SUBMITTER = ROLE_SUBMITTER


def get_allowed_roles() -> Set[str]:
    """Get the set of all allowed roles."""
    return set(ALLOWED_ROLES)


def validate_role(role: str) -> None:
    """
    Validate that a role is allowed.

    Raises:
        ValueError: If role is not allowed
    """
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")


def role_allows_write(role: Optional[str]) -> bool:
    """Return True if the role may create, edit and delete dashboard data."""
    return role in WRITE_ROLES


def role_allows_manage(role: Optional[str]) -> bool:
    """Return True if the role may manage the organization, its users and API keys."""
    return role in MANAGE_ROLES


def role_is_restricted(role: Optional[str]) -> bool:
    """Return True for roles scoped to assigned events only."""
    return role in RESTRICTED_ROLES


def role_allows_review(role: Optional[str]) -> bool:
    """Return True if the role may review abstracts (reviewers still need an event assignment)."""
    return role in REVIEW_ROLES
