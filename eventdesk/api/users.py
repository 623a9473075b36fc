"""
Organization users API endpoints.

List, invite, update and remove the members of the caller's organization.
New members receive an invitation link instead of a password. Any signed-in
user may read and rename their own record; roles stay with administrators.
"""
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.deps import get_current_user_context
from eventdesk.api.permissions import require_manage, require_organization
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import organizations as org_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.services.notification_service import NotificationService, get_notification_service
from eventdesk.utils.role_permissions import INVITABLE_ROLES, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organization/users", tags=["organization-users"])


def _get_member(db: Session, user_id: uuid.UUID, org_id: uuid.UUID):
    member = user_repo.get_user(db, user_id)
    if member is None or member.organization_id != org_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return member


@router.get("", response_model=List[schemas.User])
def list_users(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    return user_repo.list_organization_users(db, require_organization(current_user))


@router.get("/{user_id}", response_model=schemas.User)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    if user_id == current_user.get("id"):
        return user
    return _get_member(db, user_id, require_organization(current_user))


@router.post("", response_model=schemas.UserInviteResponse, status_code=status.HTTP_201_CREATED)
def invite_user(
    payload: schemas.UserInvite,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    notifications: NotificationService = Depends(get_notification_service),
):
    user, current_user = user_context
    org_id = require_manage(current_user)
    if payload.role.value not in INVITABLE_ROLES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role")
    if user_repo.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")

    member = user_repo.create_user(
        db,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role.value,
        organization_id=org_id,
    )
    _row, token = user_repo.issue_invitation(db, email=member.email)
    db.commit()
    db.refresh(member)

    org = org_repo.get_organization(db, org_id)
    result = notifications.notify_user_invitation(
        user=member,
        token=token,
        organization_name=org.name if org else "your organization",
        inviter_name=user.full_name,
    )
    if not result.get("success"):
        logger.warning("user_invitation_email_failed email=%s error=%s", member.email, result.get("error"))

    audit_log(
        db,
        action=AuditAction.CREATE,
        entity_type="User",
        entity_id=member.id,
        actor=current_user,
        changes={"email": member.email, "role": member.role, "invitation_sent": bool(result.get("success"))},
        request=request,
    )
    base = schemas.User.model_validate(member).model_dump()
    return schemas.UserInviteResponse(**base, invitation_sent=bool(result.get("success")))


@router.put("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: uuid.UUID,
    payload: schemas.UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    if payload.role is None and user_id == current_user.get("id"):
        member = user
    else:
        member = _get_member(db, user_id, require_manage(current_user))
    if payload.role is not None and payload.role.value == ROLE_SUPER_ADMIN and not current_user.get("is_superadmin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can grant super admin")

    before = {"first_name": member.first_name, "last_name": member.last_name, "role": member.role}
    if payload.first_name is not None:
        member.first_name = payload.first_name
    if payload.last_name is not None:
        member.last_name = payload.last_name
    if payload.role is not None:
        member.role = payload.role.value
    db.commit()
    db.refresh(member)
    audit_log(
        db,
        action=AuditAction.UPDATE,
        entity_type="User",
        entity_id=member.id,
        actor=current_user,
        changes={"before": before, "after": payload.model_dump(exclude_unset=True)},
        request=request,
    )
    return member


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    org_id = require_manage(current_user)
    if user_id == current_user.get("id"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    member = _get_member(db, user_id, org_id)
    email = member.email
    user_repo.delete_invitations(db, email=email)
    db.delete(member)
    db.commit()
    audit_log(
        db,
        action=AuditAction.DELETE,
        entity_type="User",
        entity_id=user_id,
        actor=current_user,
        changes={"email": email},
        request=request,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
