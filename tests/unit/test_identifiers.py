import re

import pytest

from eventdesk.utils import identifiers


@pytest.mark.parametrize(
    "text,expected",
    [
        ("  Python Summit 2026: Berlin! ", "python-summit-2026-berlin"),
        ("Hello_World  --  Again", "hello-world-again"),
        ("Café Night", "caf-night"),
        ("---", ""),
        ("", ""),
    ],
)
def test_slugify(text, expected):
    assert identifiers.slugify(text) == expected


def test_unique_slug_appends_epoch_millis(monkeypatch):
    monkeypatch.setattr(identifiers.time, "time", lambda: 1767225600.5)
    assert identifiers.unique_slug("pycon") == "pycon-1767225600500"


def test_qr_code_format():
    code = identifiers.generate_qr_code()
    assert re.fullmatch(r"QR-\d+-[0-9A-Z]{7}", code)


def test_qr_codes_differ():
    codes = {identifiers.generate_qr_code() for _ in range(50)}
    assert len(codes) == 50


def test_confirmation_number_format():
    assert re.fullmatch(r"ACC-[0-9A-Z]{8}", identifiers.generate_confirmation_number())
