"""
Organization API key endpoints.

Keys authenticate integrations for read-only access to the organization's
events. The raw key is returned once, on creation.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import require_manage, require_organization
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import api_keys as api_key_repo

router = APIRouter(prefix="/organization/api-keys", tags=["api-keys"])


@router.get("", response_model=List[schemas.ApiKeyResponse])
def list_api_keys(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    return api_key_repo.list_api_keys(db, organization_id=require_organization(current_user))


@router.post("", response_model=schemas.ApiKeyCreateResponse, status_code=status.HTTP_201_CREATED)
def create_api_key(
    payload: schemas.ApiKeyCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    org_id = require_manage(current_user)
    api_key, raw_key = api_key_repo.create_api_key(db, organization_id=org_id, payload=payload)
    audit_log(
        db,
        action=AuditAction.API_KEY_CREATE,
        entity_type="ApiKey",
        entity_id=api_key.id,
        actor=current_user,
        changes={"name": api_key.name, "prefix": api_key.prefix},
        request=request,
    )
    base = schemas.ApiKeyResponse.model_validate(api_key).model_dump()
    return schemas.ApiKeyCreateResponse(**base, key=raw_key)


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_api_key(
    key_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    org_id = require_manage(current_user)
    api_key = api_key_repo.get_api_key_in_org(db, api_key_id=key_id, organization_id=org_id)
    if api_key is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")
    api_key = api_key_repo.revoke_api_key(db, api_key=api_key)
    audit_log(
        db,
        action=AuditAction.API_KEY_REVOKE,
        entity_type="ApiKey",
        entity_id=api_key.id,
        actor=current_user,
        changes={"name": api_key.name},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
