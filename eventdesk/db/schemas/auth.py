import uuid
from pydantic import BaseModel, ConfigDict, Field

from .common import Email


class RegisterRequest(BaseModel):
    organization_name: str = Field(min_length=2)
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    email: Email
    password: str = Field(min_length=6)


class AcceptInvitationRequest(BaseModel):
    token: str = Field(min_length=1)
    email: Email
    password: str = Field(min_length=6, description="Password must be at least 6 characters")


class RegisteredUser(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    organization_id: uuid.UUID | None = None
    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    user: RegisteredUser


class InvitedUser(BaseModel):
    first_name: str
    last_name: str
    email: str
    organization_name: str | None = None


class InvitationValidation(BaseModel):
    valid: bool
    user: InvitedUser


class AcceptInvitationResponse(BaseModel):
    message: str
    email: str
