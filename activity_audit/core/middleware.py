"""CORS, request-id, logging, and activity log middleware."""

import uuid
import time
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from activity_audit.core.config import settings
from activity_audit.core.security import resolve_principal
from activity_audit.db import session as db_session
from activity_audit.services.audit_service import RequestDescriptor, audit_service

logger = logging.getLogger("activity_audit")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Add a unique request ID to every request/response."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        response: Response = await call_next(request)

        duration = round((time.time() - start_time) * 1000, 2)
        response.headers["X-Request-Id"] = request_id
        response.headers["X-Response-Time-Ms"] = str(duration)

        logger.info(
            "%s %s %s %sms",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response


class ActivityLogMiddleware(BaseHTTPMiddleware):
    """After the response is produced, append the request to the activity log.

    Runs once per request. Failures are logged and swallowed here so the
    response already produced is returned unchanged.
    """

    def __init__(self, app, session_factory: Optional[Callable[[], Session]] = None):
        super().__init__(app)
        self._session_factory = session_factory

    def _new_session(self) -> Session:
        factory = self._session_factory or db_session.SessionLocal
        return factory()

    def _record(self, request: Request, status_code: int) -> None:
        db = None
        try:
            db = self._new_session()
            principal = resolve_principal(request, db)
            descriptor = RequestDescriptor.from_request(request, status_code)
            audit_service.record_activity(db, principal, descriptor)
        except Exception:
            logger.exception(
                "Failed to record activity for %s %s",
                request.method,
                request.url.path,
            )
        finally:
            if db is not None:
                db.close()

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        # Blocking database work stays off the event loop
        await run_in_threadpool(self._record, request, response.status_code)
        return response


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application."""
    # Activity log (innermost, sees the matched route)
    app.add_middleware(ActivityLogMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID + timing
    app.add_middleware(RequestIdMiddleware)
