"""
Audit logging helpers and enums.

Persists one normalized audit record per dashboard mutation. Callers pass the
acting context dict from the auth dependencies so API-key and user actions are
recorded the same way.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.requests import Request

from eventdesk.db import models

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CHECK_IN = "CHECK_IN"
    EMAIL_SENT = "EMAIL_SENT"
    ACCEPT_INVITATION = "ACCEPT_INVITATION"
    API_KEY_CREATE = "API_KEY_CREATE"
    API_KEY_REVOKE = "API_KEY_REVOKE"
    REVIEW = "REVIEW"


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def log(
    db: Session,
    *,
    action: AuditAction | str,
    entity_type: str,
    entity_id: Optional[uuid.UUID | str] = None,
    actor: Optional[Dict[str, Any]] = None,
    event_id: Optional[uuid.UUID] = None,
    organization_id: Optional[uuid.UUID] = None,
    changes: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> Optional[models.AuditLog]:
    """Central audit logging helper.

    ``actor`` is the ``current_user`` dict produced by the auth dependencies.
    Audit failures never propagate: the record is dropped and the error logged.
    """
    actor = actor or {}
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    entry = models.AuditLog(
        organization_id=organization_id or actor.get("organization_id"),
        event_id=event_id,
        user_id=actor.get("id"),
        action=action_value,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        changes=_jsonable(changes or {}),
        ip_address=(request.client.host if request is not None and request.client else None),
        user_agent=(request.headers.get("user-agent") if request is not None else None),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("audit_write_failed action=%s entity=%s id=%s", action_value, entity_type, entity_id)
        return None
    return entry


__all__ = ["AuditAction", "log"]
