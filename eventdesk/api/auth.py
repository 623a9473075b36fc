"""
Authentication helpers and identity resolution.

Parses trusted proxy headers, normalizes emails, provisions the local dev
account and promotes ADMIN_EMAILS to SUPER_ADMIN.
"""
import logging
import os
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from eventdesk.db import models
from eventdesk.db.repositories import organizations as org_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.utils.role_permissions import ROLE_ADMIN, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)

DEV_USER_EMAIL = "dev@localhost"
DEV_ORGANIZATION_NAME = "Development Organization"


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def _normalize_list_env(var_name: str) -> set:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return values


def _admin_emails() -> set:
    return _normalize_list_env("ADMIN_EMAILS")


def resolve_identity_from_headers(
    x_auth_request_email: Optional[str],
    x_forwarded_email: Optional[str],
) -> Optional[str]:
    return _normalize_email(x_auth_request_email or x_forwarded_email)


def promote_if_admin(db: Session, user: models.User) -> models.User:
    """Give SUPER_ADMIN to users listed in ADMIN_EMAILS."""
    if user.email in _admin_emails() and user.role != ROLE_SUPER_ADMIN:
        user.role = ROLE_SUPER_ADMIN
        db.commit()
        db.refresh(user)
        logger.info("user_promoted_superadmin email=%s", user.email)
    return user


def get_or_create_dev_user(db: Session) -> models.User:
    """Return the local development admin, creating it and its organization once."""
    user = user_repo.get_user_by_email(db, DEV_USER_EMAIL)
    if user is not None:
        return user
    org = org_repo.create_organization(db, name=DEV_ORGANIZATION_NAME)
    user = user_repo.create_user(
        db,
        email=DEV_USER_EMAIL,
        first_name="Development",
        last_name="User",
        role=ROLE_ADMIN,
        organization_id=org.id,
    )
    db.commit()
    db.refresh(user)
    return user


def build_user_context(user: models.User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "organization_id": user.organization_id,
        "is_superadmin": user.role == ROLE_SUPER_ADMIN,
        "from_api_key": False,
    }
