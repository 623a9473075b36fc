import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Integer, Numeric, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, as_utc, now_utc


class Event(Base):
    __tablename__ = 'events'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    organization_id = Column(UUID(as_uuid=True), ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(64), nullable=False, default='UTC')
    venue = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default='DRAFT')
    # reviewerUserIds lives here, alongside free-form display settings
    settings = Column(JSONB, nullable=False, default=dict)
    banner_image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    organization = relationship("Organization", back_populates="events")
    ticket_types = relationship("TicketType", back_populates="event", cascade="all, delete-orphan")
    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")
    speakers = relationship("Speaker", back_populates="event", cascade="all, delete-orphan")
    tracks = relationship("Track", back_populates="event", cascade="all, delete-orphan")
    sessions = relationship("EventSession", back_populates="event", cascade="all, delete-orphan")
    abstracts = relationship("Abstract", back_populates="event", cascade="all, delete-orphan")
    hotels = relationship("Hotel", back_populates="event", cascade="all, delete-orphan")
    accommodations = relationship("Accommodation", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('organization_id', 'slug', name='uq_events_org_slug'),
        Index('idx_events_org_start', 'organization_id', 'start_date'),
        Index('idx_events_status', 'status'),
    )

    def reviewer_user_ids(self) -> list:
        return list((self.settings or {}).get('reviewerUserIds') or [])

    def accepts_abstracts(self) -> bool:
        return (self.settings or {}).get('allowAbstractSubmissions') is True

    def abstract_deadline(self) -> Optional[datetime]:
        raw = (self.settings or {}).get('abstractDeadline')
        if not raw:
            return None
        try:
            return as_utc(datetime.fromisoformat(str(raw).replace('Z', '+00:00')))
        except ValueError:
            return None

    def abstract_deadline_passed(self, now: Optional[datetime] = None) -> bool:
        deadline = self.abstract_deadline()
        return deadline is not None and (now or now_utc()) > deadline


class TicketType(Base):
    __tablename__ = 'ticket_types'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='USD')
    quantity = Column(Integer, nullable=False)
    sold_count = Column(Integer, nullable=False, default=0)
    max_per_order = Column(Integer, nullable=False, default=10)
    sales_start = Column(DateTime(timezone=True), nullable=True)
    sales_end = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    requires_approval = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="ticket_types")
    registrations = relationship("Registration", back_populates="ticket_type", passive_deletes=True)

    __table_args__ = (
        Index('idx_ticket_types_event_id', 'event_id'),
    )

    @property
    def registration_count(self) -> int:
        return len(self.registrations)
