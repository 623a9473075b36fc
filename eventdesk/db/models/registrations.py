import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Numeric, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Attendee(Base):
    __tablename__ = 'attendees'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    company = Column(String, nullable=True)
    job_title = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    city = Column(String, nullable=True)
    country = Column(String, nullable=True)
    dietary_reqs = Column(Text, nullable=True)
    custom_fields = Column(JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    registrations = relationship("Registration", back_populates="attendee", passive_deletes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Registration(Base):
    __tablename__ = 'registrations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    ticket_type_id = Column(UUID(as_uuid=True), ForeignKey('ticket_types.id'), nullable=False)
    attendee_id = Column(UUID(as_uuid=True), ForeignKey('attendees.id'), nullable=False)
    status = Column(String(20), nullable=False, default='PENDING')
    payment_status = Column(String(20), nullable=False, default='UNPAID')
    qr_code = Column(String(64), nullable=True, unique=True)
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="registrations")
    ticket_type = relationship("TicketType", back_populates="registrations")
    attendee = relationship("Attendee", back_populates="registrations")
    payments = relationship("Payment", back_populates="registration", cascade="all, delete-orphan")
    accommodation = relationship("Accommodation", back_populates="registration", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_registrations_event_status', 'event_id', 'status'),
        Index('idx_registrations_attendee_id', 'attendee_id'),
        Index('idx_registrations_ticket_type_id', 'ticket_type_id'),
    )


class Payment(Base):
    __tablename__ = 'payments'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    registration_id = Column(UUID(as_uuid=True), ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default='USD')
    provider_payment_id = Column(String, nullable=True, unique=True)
    status = Column(String(20), nullable=False, default='PENDING')
    receipt_url = Column(String, nullable=True)
    metadata_json = Column('metadata', JSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    registration = relationship("Registration", back_populates="payments")
