import uuid
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

from eventdesk.db.models.enums import AbstractStatus
from .common import Email, UTCDateTime
from .program import SpeakerBrief, TrackBrief


class AbstractCreate(BaseModel):
    speaker_id: uuid.UUID
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    track_id: uuid.UUID | None = None
    status: Literal["DRAFT", "SUBMITTED"] = "SUBMITTED"


class AbstractUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    track_id: uuid.UUID | None = None
    status: AbstractStatus | None = None
    review_notes: str | None = None
    review_score: int | None = Field(default=None, ge=0, le=100)


class SessionLink(BaseModel):
    id: uuid.UUID
    name: str
    start_time: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class Abstract(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    speaker_id: uuid.UUID
    track_id: uuid.UUID | None = None
    title: str
    content: str
    status: str
    review_notes: str | None = None
    review_score: int | None = None
    submitted_at: UTCDateTime | None = None
    reviewed_at: UTCDateTime | None = None
    created_at: UTCDateTime
    speaker: SpeakerBrief
    track: TrackBrief | None = None
    session: SessionLink | None = None
    model_config = ConfigDict(from_attributes=True)


# Speaker-facing

class AbstractSubmission(BaseModel):
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    bio: str | None = None
    company: str | None = None
    job_title: str | None = None
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    track_id: uuid.UUID | None = None


class AbstractSubmissionResponse(BaseModel):
    id: uuid.UUID
    status: str
    message: str


class SubmitterAccountRequest(BaseModel):
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    password: str = Field(min_length=6, description="Password must be at least 6 characters")


class SubmitterAccountResponse(BaseModel):
    message: str
    user_id: uuid.UUID
    speaker_id: uuid.UUID


class SubmitterAbstractUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    track_id: uuid.UUID | None = None


class ManagedAbstract(BaseModel):
    """What a speaker sees through the management link or their submitter account."""
    id: uuid.UUID
    event_name: str
    event_slug: str
    title: str
    content: str
    status: str
    track: TrackBrief | None = None
    review_notes: str | None = None
    submitted_at: UTCDateTime | None = None
    is_editable: bool
    deadline_passed: bool
    tracks: List[TrackBrief] = []
    model_config = ConfigDict(from_attributes=True)
