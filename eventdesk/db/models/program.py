import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Integer, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Speaker(Base):
    __tablename__ = 'speakers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    email = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    company = Column(String, nullable=True)
    job_title = Column(String, nullable=True)
    website = Column(String, nullable=True)
    photo = Column(String, nullable=True)
    social_links = Column(JSONB, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default='INVITED')
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="speakers")
    session_links = relationship("SessionSpeaker", back_populates="speaker", cascade="all, delete-orphan")
    abstracts = relationship("Abstract", back_populates="speaker", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('event_id', 'email', name='uq_speakers_event_email'),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def sessions(self) -> list:
        return [link.session for link in self.session_links]


class Track(Base):
    __tablename__ = 'tracks'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=False, default='#3B82F6')
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="tracks")
    sessions = relationship("EventSession", back_populates="track", passive_deletes=True)
    abstracts = relationship("Abstract", back_populates="track", passive_deletes=True)

    __table_args__ = (
        Index('idx_tracks_event_sort', 'event_id', 'sort_order'),
    )

    @property
    def session_count(self) -> int:
        return len(self.sessions)


class EventSession(Base):
    __tablename__ = 'event_sessions'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    track_id = Column(UUID(as_uuid=True), ForeignKey('tracks.id', ondelete='SET NULL'), nullable=True)
    abstract_id = Column(UUID(as_uuid=True), ForeignKey('abstracts.id', ondelete='SET NULL'), nullable=True, unique=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String, nullable=True)
    capacity = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default='SCHEDULED')
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="sessions")
    track = relationship("Track", back_populates="sessions")
    speaker_links = relationship("SessionSpeaker", back_populates="session", cascade="all, delete-orphan")
    abstract = relationship("Abstract", back_populates="session")

    __table_args__ = (
        Index('idx_event_sessions_event_start', 'event_id', 'start_time'),
        Index('idx_event_sessions_track_id', 'track_id'),
    )

    @property
    def speakers(self) -> list:
        return [link.speaker for link in self.speaker_links]


class SessionSpeaker(Base):
    __tablename__ = 'session_speakers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey('event_sessions.id', ondelete='CASCADE'), nullable=False)
    speaker_id = Column(UUID(as_uuid=True), ForeignKey('speakers.id', ondelete='CASCADE'), nullable=False)
    role = Column(String(50), nullable=False, default='speaker')

    session = relationship("EventSession", back_populates="speaker_links")
    speaker = relationship("Speaker", back_populates="session_links")

    __table_args__ = (
        UniqueConstraint('session_id', 'speaker_id', name='uq_session_speakers_pair'),
    )


class Abstract(Base):
    __tablename__ = 'abstracts'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    speaker_id = Column(UUID(as_uuid=True), ForeignKey('speakers.id', ondelete='CASCADE'), nullable=False)
    track_id = Column(UUID(as_uuid=True), ForeignKey('tracks.id', ondelete='SET NULL'), nullable=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default='SUBMITTED')
    review_notes = Column(Text, nullable=True)
    review_score = Column(Integer, nullable=True)
    # Public management link: the id is looked up, only the secret's hash is stored
    management_token_id = Column(String(32), nullable=True, unique=True)
    management_token_hash = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    event = relationship("Event", back_populates="abstracts")
    speaker = relationship("Speaker", back_populates="abstracts")
    track = relationship("Track", back_populates="abstracts")
    session = relationship("EventSession", back_populates="abstract", uselist=False)

    __table_args__ = (
        Index('idx_abstracts_event_status', 'event_id', 'status'),
        Index('idx_abstracts_speaker_id', 'speaker_id'),
    )
