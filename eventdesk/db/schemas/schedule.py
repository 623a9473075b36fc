import uuid
from typing import List
from pydantic import BaseModel

from .program import SpeakerBrief


class TimeSlot(BaseModel):
    hour: int
    label: str


class ScheduleBlock(BaseModel):
    session_id: uuid.UUID
    name: str
    top: float
    height: float
    location: str | None = None
    status: str
    speakers: List[SpeakerBrief] = []


class ScheduleColumn(BaseModel):
    track_id: str
    track_name: str
    color: str | None = None
    blocks: List[ScheduleBlock]


class ScheduleView(BaseModel):
    dates: List[str]
    selected_date: str | None = None
    time_slots: List[TimeSlot]
    columns: List[ScheduleColumn]
