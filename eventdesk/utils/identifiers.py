"""
Human-facing identifiers: URL slugs, ticket QR codes and booking numbers.
"""
from __future__ import annotations

import re
import secrets
import string
import time

_BASE36 = string.digits + string.ascii_uppercase

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)


def slugify(text: str) -> str:
    """Lower-case ``text`` and collapse it into a dash separated URL slug.

    >>> slugify("  Python Summit 2026: Berlin! ")
    'python-summit-2026-berlin'
    """
    slug = _NON_WORD.sub("", (text or "").lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def epoch_millis() -> int:
    return int(time.time() * 1000)


def unique_slug(base: str) -> str:
    """Suffix ``base`` with the current epoch milliseconds to dodge a collision."""
    return f"{base}-{epoch_millis()}"


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_qr_code() -> str:
    """Return a registration QR payload: ``QR-<epoch ms>-<7 base36 chars>``."""
    return f"QR-{epoch_millis()}-{random_base36(7)}"


def generate_confirmation_number() -> str:
    """Return an accommodation confirmation number such as ``ACC-7K2M9QXA``."""
    return f"ACC-{random_base36(8)}"
