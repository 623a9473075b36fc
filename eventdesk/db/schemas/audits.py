import uuid
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from .common import UTCDateTime


class AuditLog(BaseModel):
    id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    event_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    changes: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: UTCDateTime
    model_config = ConfigDict(from_attributes=True)
