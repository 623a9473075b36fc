"""
Environment switches read at request time.

DEV_MODE lets the dashboard run without the auth proxy: every request is
served as the local dev administrator (see ``api.auth.get_or_create_dev_user``).
That must never happen on a deployment reachable by attendees, so the switch
only takes effect when the configured dashboard URL is a local host.

Variables:
- DEV_MODE: ``true`` to request dev sign-in
- APP_BASE_URL: dashboard URL whose host decides whether dev sign-in is allowed
- DEV_MODE_ALLOWED_HOSTS: comma separated extra hosts (for example a
  docker-compose service name)
- ALLOW_DEV_MODE: ``true`` to accept DEV_MODE when APP_BASE_URL is unset
- INVITATION_TTL_DAYS: lifetime of invitation links, default 7
"""
import logging
import os
from typing import FrozenSet, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS: FrozenSet[str] = frozenset({"localhost", "127.0.0.1", "::1"})
DEFAULT_INVITATION_TTL_DAYS = 7


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


def _dashboard_host() -> Optional[str]:
    raw = os.getenv("APP_BASE_URL", "").strip()
    if not raw:
        return None
    # APP_BASE_URL is sometimes given without a scheme ("localhost:3000")
    host = urlsplit(raw if "://" in raw else f"//{raw}").hostname
    return host.lower() if host else None


def dev_sign_in_hosts() -> FrozenSet[str]:
    """Loopback names plus whatever DEV_MODE_ALLOWED_HOSTS adds."""
    extra = {h.strip().lower() for h in os.getenv("DEV_MODE_ALLOWED_HOSTS", "").split(",") if h.strip()}
    return LOOPBACK_HOSTS | extra


def dev_mode_requested() -> bool:
    return _flag("DEV_MODE")


def dev_mode_active() -> bool:
    """Whether requests are signed in as the dev administrator.

    Raises RuntimeError when DEV_MODE is set for a dashboard URL outside
    ``dev_sign_in_hosts()``, or with no dashboard URL at all unless
    ALLOW_DEV_MODE is set (the test runner is let through).
    """
    if not dev_mode_requested():
        return False

    host = _dashboard_host()
    if host is None:
        if not (_flag("ALLOW_DEV_MODE") or os.getenv("PYTEST_CURRENT_TEST")):
            raise RuntimeError(
                "DEV_MODE=true needs APP_BASE_URL on a local host, or ALLOW_DEV_MODE=true to run without one."
            )
    elif host not in dev_sign_in_hosts():
        raise RuntimeError(
            f"DEV_MODE=true refused: dashboard host {host!r} is not one of {sorted(dev_sign_in_hosts())}."
        )

    logger.debug("dev_mode_active host=%s", host)
    return True


def invitation_ttl_days() -> int:
    """Days an invitation link stays valid (INVITATION_TTL_DAYS, at least 1)."""
    try:
        return max(int(os.getenv("INVITATION_TTL_DAYS", str(DEFAULT_INVITATION_TTL_DAYS))), 1)
    except ValueError:
        return DEFAULT_INVITATION_TTL_DAYS
