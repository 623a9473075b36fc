import uuid
from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

from .common import Email


class SpeakerReviewerRequest(BaseModel):
    type: Literal["speaker"]
    speaker_id: uuid.UUID


class DirectReviewerRequest(BaseModel):
    type: Literal["direct"]
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


ReviewerAddRequest = Annotated[
    Union[SpeakerReviewerRequest, DirectReviewerRequest],
    Field(discriminator="type"),
]


class Reviewer(BaseModel):
    user_id: uuid.UUID
    speaker_id: uuid.UUID | None = None
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    job_title: str | None = None
    speaker_status: str | None = None
    account_active: bool = False


class AvailableSpeaker(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    job_title: str | None = None
    status: str
    user_id: uuid.UUID | None = None
    model_config = ConfigDict(from_attributes=True)


class ReviewerList(BaseModel):
    reviewers: List[Reviewer]
    available_speakers: List[AvailableSpeaker]


class ReviewerAddResponse(BaseModel):
    user_id: uuid.UUID
    invitation_sent: bool
    message: str
