"""
Logging filter that masks credentials before records reach a handler.

Covers two shapes: dict arguments (``logger.info("payload %s", body)``) and
``key=value`` / ``"key": "value"`` fragments inside the rendered message.
"""
from __future__ import annotations

import logging
import re
from typing import Any

REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset({
    "password",
    "password_hash",
    "token",
    "access_token",
    "refresh_token",
    "authorization",
    "cookie",
    "api_key",
    "x-api-key",
    "secret",
})

_INLINE = re.compile(
    r"""(?P<key>["']?(?:password|password_hash|token|authorization|api_key|x-api-key|secret)["']?\s*[:=]\s*)"""
    r"""(?P<quote>["']?)(?P<value>[^"',\s}]+)(?P=quote)""",
    re.IGNORECASE,
)


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive mapping entries masked."""
    if isinstance(value, dict):
        return {
            k: (REDACTED if str(k).lower() in SENSITIVE_KEYS else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(v) for v in value)
    return value


def redact_text(text: str) -> str:
    return _INLINE.sub(lambda m: f"{m.group('key')}{m.group('quote')}{REDACTED}{m.group('quote')}", text)


class RedactingFilter(logging.Filter):
    """Mask secrets in log record arguments and messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict):
            record.args = redact(record.args)
        elif isinstance(record.args, tuple):
            record.args = tuple(redact(a) for a in record.args)
        if isinstance(record.msg, str):
            record.msg = redact_text(record.msg)
        return True


def install_redaction(logger: logging.Logger | None = None) -> None:
    """Attach a RedactingFilter to every handler of ``logger`` (root by default)."""
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())
