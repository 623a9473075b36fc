"""
Repositories for organization API keys.

Implements create/list/revoke, lookup by key id, validation of raw keys and
last-used updates.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, UTC
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventdesk.db import models, schemas
from eventdesk.db.models.base import as_utc
from eventdesk.utils import token_crypto

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


def create_api_key(
    db: Session,
    *,
    organization_id: uuid.UUID,
    payload: schemas.ApiKeyCreateRequest,
) -> Tuple[models.ApiKey, str]:
    key_id, secret, raw_key = token_crypto.generate_api_key()
    api_key = models.ApiKey(
        organization_id=organization_id,
        key_id=key_id,
        key_hash=token_crypto.hash_secret(secret),
        name=payload.name.strip(),
        prefix=token_crypto.display_prefix(raw_key),
        is_active=True,
        created_at=_now(),
        expires_at=payload.expires_at,
    )
    db.add(api_key)
    db.commit()
    db.refresh(api_key)
    return api_key, raw_key


def list_api_keys(db: Session, *, organization_id: uuid.UUID) -> List[models.ApiKey]:
    return (
        db.query(models.ApiKey)
        .filter(models.ApiKey.organization_id == organization_id)
        .order_by(models.ApiKey.created_at.desc())
        .all()
    )


def get_api_key_in_org(db: Session, *, api_key_id: uuid.UUID, organization_id: uuid.UUID) -> Optional[models.ApiKey]:
    return (
        db.query(models.ApiKey)
        .filter(models.ApiKey.id == api_key_id, models.ApiKey.organization_id == organization_id)
        .first()
    )


def get_by_key_id(db: Session, *, key_id: str) -> Optional[models.ApiKey]:
    return db.query(models.ApiKey).filter(models.ApiKey.key_id == key_id).first()


def revoke_api_key(db: Session, *, api_key: models.ApiKey) -> models.ApiKey:
    if api_key.is_active:
        api_key.is_active = False
        db.commit()
        db.refresh(api_key)
    return api_key


def mark_used_now(db: Session, *, api_key: models.ApiKey) -> None:
    api_key.last_used_at = _now()
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("api_key_last_used_update_failed key_id=%s", api_key.key_id)


def validate_api_key(db: Session, raw_key: str) -> Optional[models.ApiKey]:
    """Return the active key matching ``raw_key``, or None.

    Format, unknown id, revoked, expired and wrong-secret cases all yield None.
    A successful match records ``last_used_at``.
    """
    parsed = token_crypto.parse_key(raw_key)
    if not parsed:
        return None
    api_key = get_by_key_id(db, key_id=parsed.key_id)
    if not api_key or not api_key.is_active:
        return None
    if api_key.expires_at is not None and as_utc(api_key.expires_at) < _now():
        return None
    if not token_crypto.verify_secret(parsed.secret, api_key.key_hash):
        return None
    mark_used_now(db, api_key=api_key)
    return api_key
