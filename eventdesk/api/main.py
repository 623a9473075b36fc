"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import os
import time
from typing import List

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request

from eventdesk.utils.log_redaction import install_redaction

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
install_redaction()
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from eventdesk.api.deps import get_current_user_context  # noqa: E402
from eventdesk.api.accounts import router as accounts_router  # noqa: E402
from eventdesk.api.organization import router as organization_router  # noqa: E402
from eventdesk.api.users import router as users_router  # noqa: E402
from eventdesk.api.api_keys import router as api_keys_router  # noqa: E402
from eventdesk.api.events import router as events_router  # noqa: E402
from eventdesk.api.tickets import router as tickets_router  # noqa: E402
from eventdesk.api.checkin import router as checkin_router  # noqa: E402
from eventdesk.api.registrations import router as registrations_router  # noqa: E402
from eventdesk.api.speakers import router as speakers_router  # noqa: E402
from eventdesk.api.tracks import router as tracks_router  # noqa: E402
from eventdesk.api.sessions import router as sessions_router  # noqa: E402
from eventdesk.api.abstracts import router as abstracts_router  # noqa: E402
from eventdesk.api.schedule import router as schedule_router  # noqa: E402
from eventdesk.api.hotels import router as hotels_router  # noqa: E402
from eventdesk.api.accommodations import router as accommodations_router  # noqa: E402
from eventdesk.api.reviewers import router as reviewers_router  # noqa: E402
from eventdesk.api.public import router as public_router  # noqa: E402
from eventdesk.api.submissions import router as submissions_router  # noqa: E402
from eventdesk.api.audits import router as audits_router  # noqa: E402

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="EventDesk Service",
    description="Multi-tenant event management API: events, tickets, registrations, program and lodging.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
]


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    configured = [o.strip() for o in raw.split(",") if o.strip()]
    return configured or DEFAULT_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed method=%s path=%s", request.method, request.url.path)
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        "request method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


router = APIRouter()


@router.get("/user-info")
def get_user_info(user_context=Depends(get_current_user_context)):
    """Return the signed-in user as the dashboard sees it."""
    user, current_user = user_context
    return {
        "authenticated": True,
        "user_id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": current_user.get("role"),
        "organization_id": str(current_user["organization_id"]) if current_user.get("organization_id") else None,
        "is_superadmin": bool(current_user.get("is_superadmin")),
    }


API_PREFIX = "/api"

app.include_router(router, prefix=API_PREFIX)
app.include_router(accounts_router, prefix=API_PREFIX)
app.include_router(organization_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(api_keys_router, prefix=API_PREFIX)
app.include_router(events_router, prefix=API_PREFIX)
app.include_router(tickets_router, prefix=API_PREFIX)
# check-in paths must match before /registrations/{registration_id}
app.include_router(checkin_router, prefix=API_PREFIX)
app.include_router(registrations_router, prefix=API_PREFIX)
app.include_router(speakers_router, prefix=API_PREFIX)
app.include_router(tracks_router, prefix=API_PREFIX)
app.include_router(sessions_router, prefix=API_PREFIX)
app.include_router(abstracts_router, prefix=API_PREFIX)
app.include_router(schedule_router, prefix=API_PREFIX)
app.include_router(hotels_router, prefix=API_PREFIX)
app.include_router(accommodations_router, prefix=API_PREFIX)
app.include_router(reviewers_router, prefix=API_PREFIX)
app.include_router(public_router, prefix=API_PREFIX)
app.include_router(submissions_router, prefix=API_PREFIX)
app.include_router(audits_router, prefix=API_PREFIX)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "eventdesk-service"}
