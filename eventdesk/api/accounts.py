"""
Account bootstrap and invitation endpoints.

Self-service registration creates an organization with its first ADMIN;
invited users and reviewers set their password through accept-invitation.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from eventdesk.audit import AuditAction, log as audit_log
from eventdesk.api.auth import build_user_context
from eventdesk.db import schemas
from eventdesk.db.schemas.auth import RegisteredUser
from eventdesk.db.database import get_db
from eventdesk.db.repositories import organizations as org_repo
from eventdesk.db.repositories import users as user_repo
from eventdesk.utils.rate_limit import client_ip, enforce_rate_limit
from eventdesk.utils.role_permissions import ROLE_ADMIN

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

RATE_WINDOW_SECONDS = 15 * 60
ACCEPT_LIMIT_PER_IP = 10
VALIDATE_LIMIT_PER_IP = 30


@router.post("/register", response_model=schemas.RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    if user_repo.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")

    org = org_repo.create_organization(db, name=payload.organization_name)
    user = user_repo.create_user(
        db,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=ROLE_ADMIN,
        organization_id=org.id,
        password=payload.password,
    )
    db.commit()
    db.refresh(user)
    logger.info("organization_registered slug=%s admin=%s", org.slug, user.email)
    return schemas.RegisterResponse(
        message="Account created successfully",
        user=RegisteredUser.model_validate(user),
    )


@router.get("/accept-invitation", response_model=schemas.InvitationValidation)
def validate_invitation(
    request: Request,
    token: str = Query(default=""),
    email: str = Query(default=""),
    db: Session = Depends(get_db),
):
    """Check an invitation link before the password form is shown."""
    enforce_rate_limit(
        f"accept-invitation:get:ip:{client_ip(request)}",
        limit=VALIDATE_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    if not token or not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing token or email")
    row = user_repo.find_invitation(db, email=email, token=token)
    if row is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid invitation link")
    if user_repo.invitation_expired(row):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invitation has expired")
    user = user_repo.get_user_by_email(db, email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return schemas.InvitationValidation(
        valid=True,
        user={
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "organization_name": user.organization.name if user.organization else None,
        },
    )


@router.post("/accept-invitation", response_model=schemas.AcceptInvitationResponse)
def accept_invitation(
    payload: schemas.AcceptInvitationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    enforce_rate_limit(
        f"accept-invitation:ip:{client_ip(request)}",
        limit=ACCEPT_LIMIT_PER_IP,
        window_seconds=RATE_WINDOW_SECONDS,
    )
    row = user_repo.find_invitation(db, email=payload.email, token=payload.token)
    if row is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired invitation link")
    if user_repo.invitation_expired(row):
        db.delete(row)
        db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invitation has expired. Please contact your administrator for a new invitation.",
        )
    user = user_repo.get_user_by_email(db, payload.email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user = user_repo.accept_invitation(db, user=user, token_row=row, password=payload.password)
    audit_log(
        db,
        action=AuditAction.ACCEPT_INVITATION,
        entity_type="User",
        entity_id=user.id,
        actor=build_user_context(user),
        changes={"email": user.email},
        request=request,
    )
    return schemas.AcceptInvitationResponse(message="Account setup complete. You can now sign in.", email=user.email)
