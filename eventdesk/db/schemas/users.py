import uuid
from pydantic import BaseModel, ConfigDict, Field

from eventdesk.utils.role_permissions import UserRole
from .common import Email, UTCDateTime


class UserBase(BaseModel):
    email: Email
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class UserInvite(UserBase):
    role: UserRole = UserRole.ORGANIZER


class UserUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    role: UserRole | None = None


class User(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: str
    organization_id: uuid.UUID | None = None
    email_verified_at: UTCDateTime | None = None
    image: str | None = None
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)


class UserInviteResponse(User):
    invitation_sent: bool = False
