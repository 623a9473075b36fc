import uuid
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventdesk.db.models.enums import SpeakerStatus, SessionStatus
from .common import Email, HexColor, UTCDateTime


# Speakers

class SpeakerFields(BaseModel):
    bio: str | None = None
    company: str | None = None
    job_title: str | None = None
    website: str | None = None
    photo: str | None = None
    social_links: Dict[str, Any] | None = None


class SpeakerCreate(SpeakerFields):
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    status: SpeakerStatus = SpeakerStatus.INVITED


class SpeakerUpdate(SpeakerFields):
    email: Email | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    status: SpeakerStatus | None = None


class SpeakerBrief(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    photo: str | None = None
    model_config = ConfigDict(from_attributes=True)


class SessionBrief(BaseModel):
    id: uuid.UUID
    name: str
    start_time: UTCDateTime
    end_time: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class Speaker(SpeakerFields):
    id: uuid.UUID
    event_id: uuid.UUID
    user_id: uuid.UUID | None = None
    email: str
    first_name: str
    last_name: str
    status: str
    social_links: Dict[str, Any] = {}
    created_at: UTCDateTime
    sessions: List[SessionBrief] = []
    model_config = ConfigDict(from_attributes=True)


# Tracks

class TrackCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    color: HexColor = "#3B82F6"
    sort_order: int | None = Field(default=None, ge=0)


class TrackUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    color: HexColor | None = None
    sort_order: int | None = Field(default=None, ge=0)


class TrackBrief(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    model_config = ConfigDict(from_attributes=True)


class Track(TrackBrief):
    event_id: uuid.UUID
    description: str | None = None
    sort_order: int
    session_count: int = 0
    created_at: UTCDateTime


# Sessions

class SessionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    track_id: uuid.UUID | None = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    location: str | None = None
    capacity: int | None = Field(default=None, ge=1)
    status: SessionStatus = SessionStatus.SCHEDULED
    abstract_id: uuid.UUID | None = None
    # empty with an abstract_id means the abstract's speaker
    speaker_ids: List[uuid.UUID] = []

    @model_validator(mode="after")
    def _times_in_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class SessionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    track_id: uuid.UUID | None = None
    start_time: UTCDateTime | None = None
    end_time: UTCDateTime | None = None
    location: str | None = None
    capacity: int | None = Field(default=None, ge=1)
    status: SessionStatus | None = None
    abstract_id: uuid.UUID | None = None
    speaker_ids: List[uuid.UUID] | None = None


class Session(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    track_id: uuid.UUID | None = None
    abstract_id: uuid.UUID | None = None
    name: str
    description: str | None = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    location: str | None = None
    capacity: int | None = None
    status: str
    track: TrackBrief | None = None
    speakers: List[SpeakerBrief] = []
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)
