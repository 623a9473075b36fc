"""
Audit log listing for organization administrators.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import require_manage
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories.audits import get_audit_logs

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=List[schemas.AuditLog])
def list_audit_logs(
    organization_id: Optional[uuid.UUID] = Query(default=None),
    event_id: Optional[uuid.UUID] = Query(default=None),
    entity_type: Optional[str] = Query(default=None),
    action: Optional[str] = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    """Newest first, scoped to the caller's organization.

    Super admins may read another organization's log by passing ``organization_id``.
    """
    _user, current_user = user_context
    org_id = require_manage(current_user)
    if organization_id is not None and current_user.get("is_superadmin"):
        org_id = organization_id
    return get_audit_logs(
        db,
        organization_id=org_id,
        event_id=event_id,
        entity_type=entity_type,
        action=action,
        skip=skip,
        limit=limit,
    )
