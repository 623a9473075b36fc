import re

import pytest

from eventdesk.utils import token_crypto as tc


def test_generate_parse_and_verify_api_key():
    key_id, secret, raw = tc.generate_api_key()
    assert raw.startswith(tc.KEY_PREFIX)
    parsed = tc.parse_key(raw)
    assert parsed is not None
    assert parsed.key_id == key_id
    assert parsed.secret == secret
    encoded = tc.hash_secret(secret)
    assert encoded.startswith("$argon2id$")
    assert tc.verify_secret(secret, encoded) is True
    assert tc.verify_secret(secret + "x", encoded) is False


def test_parse_key_keeps_underscores_in_secret():
    parsed = tc.parse_key("evk_abc123_sec_ret")
    assert parsed.key_id == "abc123"
    assert parsed.secret == "sec_ret"


@pytest.mark.parametrize("raw", ["", "abc", "evk_", "evk__secret", "evk_abc_", "pat_abc_secret", "evk_nosecret"])
def test_parse_key_rejects_malformed(raw):
    assert tc.parse_key(raw) is None


def test_verify_secret_handles_garbage_hash():
    assert tc.verify_secret("anything", "not-an-argon2-hash") is False
    assert tc.verify_secret("", "whatever") is False


def test_display_prefix_length():
    _kid, _sec, raw = tc.generate_api_key()
    assert tc.display_prefix(raw) == raw[:12]
    assert tc.display_prefix(raw).startswith("evk_")


def test_invitation_token_is_64_hex_chars():
    token = tc.generate_invitation_token()
    assert re.fullmatch(r"[0-9a-f]{64}", token)


def test_unusable_password_hash_is_unique():
    assert tc.unusable_password_hash() != tc.unusable_password_hash()


def test_management_token_uses_its_own_prefix():
    key_id, secret, raw = tc.generate_management_token()
    assert raw.startswith("abs_")
    parsed = tc.parse_key(raw, prefix=tc.MANAGEMENT_TOKEN_PREFIX)
    assert (parsed.key_id, parsed.secret) == (key_id, secret)
    # an abstract link is never accepted as an API key
    assert tc.parse_key(raw) is None
