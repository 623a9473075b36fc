import uuid
from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime


class ApiKeyCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    expires_at: UTCDateTime | None = None


class ApiKeyResponse(BaseModel):
    id: uuid.UUID
    name: str
    prefix: str
    is_active: bool
    created_at: UTCDateTime
    last_used_at: UTCDateTime | None = None
    expires_at: UTCDateTime | None = None
    model_config = ConfigDict(from_attributes=True)


class ApiKeyCreateResponse(ApiKeyResponse):
    key: str  # shown exactly once
