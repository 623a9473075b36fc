import uuid
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime


class OrganizationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    logo: str | None = None
    settings: Dict[str, Any] | None = None


class Organization(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    logo: str | None = None
    settings: Dict[str, Any] = {}
    created_at: UTCDateTime
    updated_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class OrganizationDetail(Organization):
    user_count: int = 0
    event_count: int = 0
