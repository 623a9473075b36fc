"""
Shared field types and validators for request/response schemas.
"""
import re
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, EmailStr

from eventdesk.db.models.base import as_utc

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def validate_hex_color(value: str) -> str:
    if not _HEX_COLOR_RE.match(value or ""):
        raise ValueError("color must be a hex value such as #3B82F6")
    return value


# Naive datetimes are read as UTC; everything is stored and returned in UTC.
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]
# Attendees, speakers and users are matched on the lower-cased address.
Email = Annotated[EmailStr, AfterValidator(str.lower)]
HexColor = Annotated[str, AfterValidator(validate_hex_color)]
