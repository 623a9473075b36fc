import pytest
from pydantic import TypeAdapter, ValidationError

from eventdesk.db.schemas.common import Email, HexColor

email = TypeAdapter(Email)
color = TypeAdapter(HexColor)


def test_email_is_lower_cased():
    assert email.validate_python("Ada.Lovelace@Example.COM") == "ada.lovelace@example.com"


@pytest.mark.parametrize("value", ["nope", "a@b..c", "ada@", "@example.com", "two@@example.com", "ada lovelace@example.com"])
def test_email_rejects_malformed_addresses(value):
    with pytest.raises(ValidationError):
        email.validate_python(value)


def test_hex_color():
    assert color.validate_python("#10B981") == "#10B981"
    with pytest.raises(ValidationError):
        color.validate_python("10B981")
