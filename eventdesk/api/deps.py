"""
API dependency helpers.

Provides the acting identity for routes: a signed-in user resolved from proxy
headers, or for read routes an organization API key.
"""
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from eventdesk.api.auth import (
    build_user_context,
    get_or_create_dev_user,
    promote_if_admin,
    resolve_identity_from_headers,
)
from eventdesk.db.database import get_db
from eventdesk.db.repositories import api_keys as api_key_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.utils.runtime import dev_mode_active

# Contract:
# Returns (sqlalchemy User model or None, current_user context dict)
# Raises 401 if identity cannot be resolved.


def get_current_user_context(
    db: Session = Depends(get_db),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    if dev_mode_active():
        user = get_or_create_dev_user(db)
    else:
        email = resolve_identity_from_headers(x_auth_request_email, x_forwarded_email)
        if not email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
        user = user_repo.get_user_by_email(db, email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    user = promote_if_admin(db, user)
    return user, build_user_context(user)


def _extract_api_key(authorization: Optional[str], x_api_key: Optional[str]) -> Optional[str]:
    if x_api_key and x_api_key.strip():
        return x_api_key.strip()
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def get_org_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    """Return the org context from a signed-in user or, failing that, an API key.

    API-key contexts carry no user: ``(None, {organization_id, user_id: None,
    role: None, from_api_key: True})``.
    """
    has_identity = bool(resolve_identity_from_headers(x_auth_request_email, x_forwarded_email))
    raw_key = _extract_api_key(authorization, x_api_key)
    if has_identity or raw_key is None or dev_mode_active():
        return get_current_user_context(
            db=db,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_email=x_forwarded_email,
        )

    api_key = api_key_repo.validate_api_key(db, raw_key)
    if api_key is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return None, {
        "id": None,
        "user_id": None,
        "email": None,
        "role": None,
        "organization_id": api_key.organization_id,
        "is_superadmin": False,
        "from_api_key": True,
        "api_key_id": api_key.id,
    }
