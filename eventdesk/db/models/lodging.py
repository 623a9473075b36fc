import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Integer, Numeric, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Hotel(Base):
    __tablename__ = 'hotels'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    stars = Column(Integer, nullable=True)
    images = Column(JSONB, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="hotels")
    room_types = relationship("RoomType", back_populates="hotel", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_hotels_event_id', 'event_id'),
    )

    @property
    def booking_count(self) -> int:
        return sum(len(rt.accommodations) for rt in self.room_types)


class RoomType(Base):
    __tablename__ = 'room_types'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    hotel_id = Column(UUID(as_uuid=True), ForeignKey('hotels.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price_per_night = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default='USD')
    capacity = Column(Integer, nullable=False, default=2)
    total_rooms = Column(Integer, nullable=False)
    booked_rooms = Column(Integer, nullable=False, default=0)
    amenities = Column(JSONB, nullable=False, default=list)
    images = Column(JSONB, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    hotel = relationship("Hotel", back_populates="room_types")
    accommodations = relationship("Accommodation", back_populates="room_type", passive_deletes=True)

    @property
    def available_rooms(self) -> int:
        return max((self.total_rooms or 0) - (self.booked_rooms or 0), 0)


class Accommodation(Base):
    __tablename__ = 'accommodations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    registration_id = Column(UUID(as_uuid=True), ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False, unique=True)
    room_type_id = Column(UUID(as_uuid=True), ForeignKey('room_types.id'), nullable=False)
    check_in = Column(DateTime(timezone=True), nullable=False)
    check_out = Column(DateTime(timezone=True), nullable=False)
    guest_count = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default='PENDING')
    total_price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default='USD')
    confirmation_no = Column(String(32), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="accommodations")
    registration = relationship("Registration", back_populates="accommodation")
    room_type = relationship("RoomType", back_populates="accommodations")

    __table_args__ = (
        Index('idx_accommodations_event_status', 'event_id', 'status'),
        Index('idx_accommodations_room_type_id', 'room_type_id'),
    )
