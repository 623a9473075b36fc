"""
Key generation, parsing and hashing utilities for API keys and invitations.

Responsibilities:
- Generate API keys of the form: evk_<key_id>_<secret>
- Generate abstract management tokens of the form: abs_<key_id>_<secret>
- Hash secrets, invitation tokens and passwords with Argon2id
- Verify hashes without leaking timing or exceptions to callers
- Derive the display prefix shown in the API key list
"""
from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type

_argon2 = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)


KEY_PREFIX = "evk_"
MANAGEMENT_TOKEN_PREFIX = "abs_"
DISPLAY_PREFIX_LENGTH = 12


@dataclass(frozen=True)
class ParsedKey:
    key_id: str
    secret: str


def generate_key_id() -> str:
    """Return a short hex key id suitable for DB lookup and logs."""
    return uuid.uuid4().hex[:16]


def generate_secret(length: int = 32) -> str:
    """Return a high-entropy url-safe secret string."""
    return secrets.token_urlsafe(length)


def build_key_string(key_id: str, secret: str, prefix: str = KEY_PREFIX) -> str:
    return f"{prefix}{key_id}_{secret}"


def parse_key(raw_key: str, prefix: str = KEY_PREFIX) -> Optional[ParsedKey]:
    """Parse a raw API key into key_id and secret.

    Returns None if the format is invalid.
    """
    if not raw_key or not raw_key.startswith(prefix):
        return None
    body = raw_key[len(prefix):]
    # key_id is hex, the secret may contain '_' so split once
    idx = body.find("_")
    if idx <= 0:
        return None
    key_id = body[:idx]
    secret = body[idx + 1:]
    if not key_id or not secret:
        return None
    return ParsedKey(key_id=key_id, secret=secret)


def hash_secret(secret: str) -> str:
    """Hash a secret (API key secret, invitation token or password) with Argon2id."""
    return _argon2.hash(secret)


def verify_secret(secret: str, encoded_hash: str) -> bool:
    if not secret or not encoded_hash:
        return False
    try:
        return _argon2.verify(encoded_hash, secret)
    except (VerificationError, InvalidHashError):
        return False


def display_prefix(raw_key: str) -> str:
    """Return the first characters of a raw key for list views."""
    return raw_key[:DISPLAY_PREFIX_LENGTH]


def generate_api_key() -> Tuple[str, str, str]:
    """Generate a new API key and return (key_id, secret, raw_key)."""
    kid = generate_key_id()
    sec = generate_secret()
    return kid, sec, build_key_string(kid, sec)


def generate_invitation_token() -> str:
    """Return a 64 character hex token sent in invitation links."""
    return secrets.token_hex(32)


def unusable_password_hash() -> str:
    """Hash a random secret nobody knows; used until an invitation is accepted."""
    return hash_secret(secrets.token_hex(32))


def generate_management_token() -> Tuple[str, str, str]:
    """Generate the link token a speaker uses to follow an abstract; returns (key_id, secret, raw_token)."""
    kid = generate_key_id()
    sec = generate_secret(24)
    return kid, sec, build_key_string(kid, sec, prefix=MANAGEMENT_TOKEN_PREFIX)
