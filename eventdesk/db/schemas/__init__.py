"""
Domain-split Pydantic schemas with a single import surface.

Routers use ``from eventdesk.db import schemas`` and refer to
``schemas.EventCreate`` and friends.
"""

# Import order: shared field types first, then the domains that reuse them
from .common import Email, HexColor, UTCDateTime
from .organizations import OrganizationUpdate, Organization, OrganizationDetail
from .users import UserBase, UserInvite, UserUpdate, User, UserInviteResponse
from .auth import (
    RegisterRequest,
    RegisterResponse,
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    InvitationValidation,
)
from .tokens import ApiKeyCreateRequest, ApiKeyResponse, ApiKeyCreateResponse
from .events import (
    EventCreate,
    EventUpdate,
    EventCounts,
    Event,
    EventDetail,
    TicketTypeCreate,
    TicketTypeUpdate,
    TicketType,
)
from .registrations import (
    RegistrationCreate,
    RegistrationUpdate,
    AttendeeUpdate,
    Attendee,
    Registration,
    RegistrationDetail,
    CheckInByCode,
    CheckInResult,
    RegistrationEmailRequest,
    SpeakerEmailRequest,
    EmailSendResult,
)
from .program import (
    SpeakerCreate,
    SpeakerUpdate,
    SpeakerBrief,
    Speaker,
    TrackCreate,
    TrackUpdate,
    Track,
    SessionCreate,
    SessionUpdate,
    Session,
)
from .abstracts import (
    AbstractCreate,
    AbstractUpdate,
    Abstract,
    AbstractSubmission,
    AbstractSubmissionResponse,
    SubmitterAccountRequest,
    SubmitterAccountResponse,
    SubmitterAbstractUpdate,
    ManagedAbstract,
)
from .schedule import TimeSlot, ScheduleBlock, ScheduleColumn, ScheduleView
from .lodging import (
    HotelCreate,
    HotelUpdate,
    Hotel,
    RoomTypeCreate,
    RoomTypeUpdate,
    RoomType,
    AccommodationCreate,
    AccommodationUpdate,
    Accommodation,
)
from .reviewers import (
    SpeakerReviewerRequest,
    DirectReviewerRequest,
    ReviewerAddRequest,
    Reviewer,
    AvailableSpeaker,
    ReviewerList,
    ReviewerAddResponse,
)
from .public import (
    PublicOrganization,
    PublicTicketType,
    PublicEvent,
    PublicRegistrationRequest,
    PublicRegistrationResponse,
)
from .audits import AuditLog

__all__ = [
    "Email",
    "HexColor",
    "UTCDateTime",
    "OrganizationUpdate",
    "Organization",
    "OrganizationDetail",
    "UserBase",
    "UserInvite",
    "UserUpdate",
    "User",
    "UserInviteResponse",
    "RegisterRequest",
    "RegisterResponse",
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "InvitationValidation",
    "ApiKeyCreateRequest",
    "ApiKeyResponse",
    "ApiKeyCreateResponse",
    "EventCreate",
    "EventUpdate",
    "EventCounts",
    "Event",
    "EventDetail",
    "TicketTypeCreate",
    "TicketTypeUpdate",
    "TicketType",
    "RegistrationCreate",
    "RegistrationUpdate",
    "AttendeeUpdate",
    "Attendee",
    "Registration",
    "RegistrationDetail",
    "CheckInByCode",
    "CheckInResult",
    "RegistrationEmailRequest",
    "SpeakerEmailRequest",
    "EmailSendResult",
    "SpeakerCreate",
    "SpeakerUpdate",
    "SpeakerBrief",
    "Speaker",
    "TrackCreate",
    "TrackUpdate",
    "Track",
    "SessionCreate",
    "SessionUpdate",
    "Session",
    "AbstractCreate",
    "AbstractUpdate",
    "Abstract",
    "AbstractSubmission",
    "AbstractSubmissionResponse",
    "SubmitterAccountRequest",
    "SubmitterAccountResponse",
    "SubmitterAbstractUpdate",
    "ManagedAbstract",
    "TimeSlot",
    "ScheduleBlock",
    "ScheduleColumn",
    "ScheduleView",
    "HotelCreate",
    "HotelUpdate",
    "Hotel",
    "RoomTypeCreate",
    "RoomTypeUpdate",
    "RoomType",
    "AccommodationCreate",
    "AccommodationUpdate",
    "Accommodation",
    "SpeakerReviewerRequest",
    "DirectReviewerRequest",
    "ReviewerAddRequest",
    "Reviewer",
    "AvailableSpeaker",
    "ReviewerList",
    "ReviewerAddResponse",
    "PublicOrganization",
    "PublicTicketType",
    "PublicEvent",
    "PublicRegistrationRequest",
    "PublicRegistrationResponse",
    "AuditLog",
]
