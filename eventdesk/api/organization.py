"""
Organization API endpoints.

The caller's own organization: details with counts, and admin updates.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import require_manage, require_organization
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import organizations as org_repo

router = APIRouter(prefix="/organization", tags=["organization"])


def _detail(db: Session, org) -> schemas.OrganizationDetail:
    base = schemas.Organization.model_validate(org).model_dump()
    return schemas.OrganizationDetail(**base, **org_repo.get_counts(db, org.id))


@router.get("", response_model=schemas.OrganizationDetail)
def get_organization(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    org = org_repo.get_organization(db, require_organization(current_user))
    if org is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    return _detail(db, org)


@router.put("", response_model=schemas.OrganizationDetail)
def update_organization(
    payload: schemas.OrganizationUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    org_id = require_manage(current_user)
    org = org_repo.get_organization(db, org_id)
    if org is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    org = org_repo.update_organization(db, org, payload)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="Organization",
        entity_id=org.id,
        actor=current_user,
        changes=payload.model_dump(exclude_unset=True),
        request=request,
    )
    return _detail(db, org)
