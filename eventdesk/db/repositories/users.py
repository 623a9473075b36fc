"""
User and invitation repository functions.

Invitations are VerificationToken rows keyed by the lower-cased e-mail; only
the Argon2 hash of the token ever reaches the database.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, UTC
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from eventdesk.db import models
from eventdesk.db.models.base import as_utc
from eventdesk.utils import token_crypto
from eventdesk.utils.runtime import invitation_ttl_days


def get_user(db: Session, user_id: uuid.UUID) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_users_by_ids(db: Session, user_ids) -> List[models.User]:
    ids = [uuid.UUID(str(u)) for u in user_ids]
    if not ids:
        return []
    return db.query(models.User).filter(models.User.id.in_(ids)).all()


def list_organization_users(db: Session, organization_id: uuid.UUID) -> List[models.User]:
    return (
        db.query(models.User)
        .filter(models.User.organization_id == organization_id)
        .order_by(models.User.created_at.asc())
        .all()
    )


def create_user(
    db: Session,
    *,
    email: str,
    first_name: str,
    last_name: str,
    role: str,
    organization_id: Optional[uuid.UUID],
    password: Optional[str] = None,
) -> models.User:
    """Add a user to the session without committing.

    Without ``password`` the account gets an unusable hash and stays locked
    until its invitation is accepted.
    """
    user = models.User(
        email=email.strip().lower(),
        first_name=first_name,
        last_name=last_name,
        role=role,
        organization_id=organization_id,
        password_hash=token_crypto.hash_secret(password) if password else token_crypto.unusable_password_hash(),
    )
    db.add(user)
    db.flush()
    return user


def issue_invitation(db: Session, *, email: str) -> Tuple[models.VerificationToken, str]:
    """Replace any pending invitation for ``email`` and return (row, raw token)."""
    identifier = email.strip().lower()
    db.query(models.VerificationToken).filter(models.VerificationToken.identifier == identifier).delete(
        synchronize_session=False
    )
    raw = token_crypto.generate_invitation_token()
    row = models.VerificationToken(
        identifier=identifier,
        token_hash=token_crypto.hash_secret(raw),
        expires_at=datetime.now(UTC) + timedelta(days=invitation_ttl_days()),
    )
    db.add(row)
    db.flush()
    return row, raw


def find_invitation(db: Session, *, email: str, token: str) -> Optional[models.VerificationToken]:
    """Return the invitation row whose hash matches ``token``, expired or not."""
    rows = (
        db.query(models.VerificationToken)
        .filter(models.VerificationToken.identifier == email.strip().lower())
        .all()
    )
    for row in rows:
        if token_crypto.verify_secret(token, row.token_hash):
            return row
    return None


def invitation_expired(row: models.VerificationToken, now: Optional[datetime] = None) -> bool:
    return as_utc(row.expires_at) < (now or datetime.now(UTC))


def accept_invitation(db: Session, *, user: models.User, token_row: models.VerificationToken, password: str) -> models.User:
    user.password_hash = token_crypto.hash_secret(password)
    user.email_verified_at = datetime.now(UTC)
    db.delete(token_row)
    db.commit()
    db.refresh(user)
    return user


def delete_invitations(db: Session, *, email: str) -> None:
    db.query(models.VerificationToken).filter(
        models.VerificationToken.identifier == email.strip().lower()
    ).delete(synchronize_session=False)
