"""
App assembly entry point.

Re-exports the FastAPI `app` from `eventdesk.api.main` for `uvicorn app:app`.
"""

from eventdesk.api.main import app  # noqa: F401
