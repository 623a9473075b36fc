"""
Audit log repository functions.

Writes go through ``eventdesk.audit.log``; this module implements the
filtered, newest-first query behind the audit log screen.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from eventdesk.db import models


def get_audit_logs(
    db: Session,
    *,
    organization_id: Optional[uuid.UUID] = None,
    event_id: Optional[uuid.UUID] = None,
    entity_type: Optional[str] = None,
    action: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[models.AuditLog]:
    query = db.query(models.AuditLog)
    if organization_id:
        query = query.filter(models.AuditLog.organization_id == organization_id)
    if event_id:
        query = query.filter(models.AuditLog.event_id == event_id)
    if entity_type:
        query = query.filter(models.AuditLog.entity_type == entity_type)
    if action:
        query = query.filter(models.AuditLog.action == action)
    return query.order_by(models.AuditLog.created_at.desc()).offset(skip).limit(limit).all()
