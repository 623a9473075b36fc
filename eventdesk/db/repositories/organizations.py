"""
Organization repository functions.

Implements lookup, slug allocation, counts and settings-merging updates.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventdesk.db import models, schemas
from eventdesk.utils.identifiers import slugify, unique_slug


def get_organization(db: Session, organization_id: uuid.UUID) -> Optional[models.Organization]:
    return db.query(models.Organization).filter(models.Organization.id == organization_id).first()


def allocate_slug(db: Session, name: str) -> str:
    """Return ``slugify(name)``, suffixed with epoch millis when already taken."""
    slug = slugify(name) or "organization"
    if db.query(models.Organization.id).filter(models.Organization.slug == slug).first():
        slug = unique_slug(slug)
    return slug


def create_organization(db: Session, *, name: str) -> models.Organization:
    """Add an organization to the session without committing."""
    org = models.Organization(name=name, slug=allocate_slug(db, name), settings={})
    db.add(org)
    db.flush()
    return org


def get_counts(db: Session, organization_id: uuid.UUID) -> dict:
    users = db.query(func.count(models.User.id)).filter(models.User.organization_id == organization_id).scalar()
    events = db.query(func.count(models.Event.id)).filter(models.Event.organization_id == organization_id).scalar()
    return {"user_count": users or 0, "event_count": events or 0}


def update_organization(
    db: Session, org: models.Organization, payload: schemas.OrganizationUpdate
) -> models.Organization:
    update_data = payload.model_dump(exclude_unset=True)
    settings = update_data.pop("settings", None)
    for key, value in update_data.items():
        if key == "name" and value is None:
            continue
        setattr(org, key, value)
    if settings is not None:
        # JSON columns are reassigned so the change is flushed
        org.settings = {**(org.settings or {}), **settings}
    db.commit()
    db.refresh(org)
    return org
