"""
URL utilities for building absolute links in emails.

Primary source: APP_BASE_URL (e.g., https://events.example.com)
Fallback: APP_HOST (adds scheme heuristically if missing).
"""
from __future__ import annotations

import os
from urllib.parse import urlencode


def _add_scheme_if_missing(host: str) -> str:
    h = host.strip()
    if not h:
        return "http://localhost:3000"
    if h.startswith("http://") or h.startswith("https://"):
        return h
    lower = h.lower()
    if lower.startswith("localhost") or lower.startswith("127.0.0.1"):
        return f"http://{h}"
    return f"https://{h}"


def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


def get_app_base_url() -> str:
    """Return normalized base URL for the dashboard application.

    Precedence:
    1. APP_BASE_URL (recommended)
    2. APP_HOST (legacy), scheme added if missing
    Defaults to http://localhost:3000 if neither is set.
    """
    base = os.getenv("APP_BASE_URL")
    if base and base.strip():
        return _strip_trailing_slash(base.strip())
    host = os.getenv("APP_HOST")
    if host and host.strip():
        return _strip_trailing_slash(_add_scheme_if_missing(host.strip()))
    return "http://localhost:3000"


def build_accept_invitation_link(*, token: str, email: str) -> str:
    """Build the account-setup link sent with user and reviewer invitations."""
    qs = urlencode({"token": token, "email": email})
    return f"{get_app_base_url()}/accept-invitation?{qs}"


def build_public_event_link(slug: str) -> str:
    return f"{get_app_base_url()}/e/{slug}"


def build_abstract_management_link(slug: str, token: str) -> str:
    """Build the link a speaker uses to follow and edit a submitted abstract."""
    return f"{get_app_base_url()}/e/{slug}/abstract/{token}"
