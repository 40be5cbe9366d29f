"""Audit service — append-only activity trail and its query surface."""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from fastapi import Request
from sqlalchemy import String, literal, or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from activity_audit.core.config import settings
from activity_audit.core.exceptions import AuditWriteError
from activity_audit.core.roles import Principal
from activity_audit.models.activity_log import ActivityLog
from activity_audit.models.user import User
from activity_audit.models.user_type import UserType
from activity_audit.schemas.schemas import (
    ActivityLogFilters, ActivityLogOut, ActivityLogPage, ActivityLogUser,
)
from activity_audit.services.classification import (
    ActivityKind, classify_activity, resolve_status,
)

logger = logging.getLogger("activity_audit")

UNKNOWN_USER = "Unknown user"

_WORD_SEPARATORS = re.compile(r"[\s_\-]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def headline(value: str) -> str:
    """Split on spaces, hyphens, underscores and camel case; capitalize each word."""
    words = []
    for chunk in _WORD_SEPARATORS.split(value.strip()):
        if chunk:
            words.extend(part for part in _CASE_BOUNDARY.split(chunk) if part)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def humanize_route(route_name: Optional[str], path: str) -> str:
    """Page label for a route name, e.g. ``programmes.approve`` -> ``Programmes / Approve``."""
    if route_name:
        return headline(route_name.replace(".", " / "))
    return path


def normalize_path(path: Optional[str]) -> str:
    path = (path or "").strip()
    if path in ("", "/"):
        return "/"
    return "/" + path.lstrip("/")


@dataclass(frozen=True)
class RequestDescriptor:
    """A completed request, as seen by the audit recorder."""

    path: str
    method: str
    status_code: int
    route_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request, status_code: int) -> "RequestDescriptor":
        """Describe a request after routing; the matched route sits in the scope."""
        route = request.scope.get("route")
        return cls(
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            route_name=getattr(route, "name", None),
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )


class AuditService:
    """Records and queries immutable activity log entries."""

    @staticmethod
    def is_self_view(route_name: Optional[str], activity: ActivityKind) -> bool:
        """Reads of the activity log itself are never recorded."""
        return activity == ActivityKind.VIEW and route_name == settings.AUDIT_LOG_ROUTE_NAME

    @staticmethod
    def describe(activity: ActivityKind, route_name: Optional[str], path: str) -> str:
        return f"{headline(activity.value)} {humanize_route(route_name, path)}."

    @staticmethod
    def record_activity(
        db: Session,
        principal: Optional[Principal],
        descriptor: RequestDescriptor,
    ) -> Optional[ActivityLog]:
        """Classify a completed request and append it to the activity log.

        Returns None without writing when there is no principal or when the
        request is a view of the activity log itself.

        Raises:
            AuditWriteError: If the entry cannot be persisted. The session is
                rolled back before raising.
        """
        if principal is None:
            return None

        activity = classify_activity(descriptor.route_name, descriptor.method)
        if AuditService.is_self_view(descriptor.route_name, activity):
            logger.debug("Skipping activity log self-view by user %s", principal.id)
            return None

        path = normalize_path(descriptor.path)
        user_agent = descriptor.user_agent
        if user_agent:
            user_agent = user_agent[:settings.AUDIT_USER_AGENT_MAX_LENGTH]

        entry = ActivityLog(
            user_id=principal.id,
            route_name=descriptor.route_name,
            path=path,
            method=descriptor.method.upper(),
            activity=activity.value,
            description=AuditService.describe(activity, descriptor.route_name, path),
            status=resolve_status(descriptor.status_code, activity).value,
            ip_address=descriptor.ip_address,
            user_agent=user_agent,
        )
        try:
            db.add(entry)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise AuditWriteError(f"Could not write activity log entry: {exc}") from exc
        return entry

    @staticmethod
    def to_view(log: ActivityLog) -> ActivityLogOut:
        """Project an entry into the presentation shape of the listing."""
        user = log.user
        user_type = user.user_type if user else None
        role = (user_type.slug or user_type.name) if user_type else None

        timestamp = None
        if log.created_at:
            created_at = log.created_at
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            timestamp = created_at.isoformat()

        return ActivityLogOut(
            id=log.id,
            page=humanize_route(log.route_name, log.path),
            page_href=log.path,
            user=ActivityLogUser(
                name=user.name if user and user.name else UNKNOWN_USER,
                role=role.lower() if role else None,
            ),
            activity=log.activity,
            description=log.description,
            status=log.status,
            ip=log.ip_address,
            device=log.user_agent,
            timestamp=timestamp,
        )

    @staticmethod
    def apply_read_timeout(db: Session, query):
        """Bound the listing query on backends that support a statement timeout.

        MySQL gets a per-statement optimizer hint and PostgreSQL a setting
        scoped to the current transaction, so pooled connections are left
        untouched.
        """
        timeout = settings.AUDIT_QUERY_TIMEOUT_MS
        if not timeout:
            return query
        dialect = db.get_bind().dialect.name
        if dialect == "mysql":
            return query.prefix_with(f"/*+ MAX_EXECUTION_TIME({int(timeout)}) */")
        if dialect == "postgresql":
            db.execute(text(f"SET LOCAL statement_timeout = {int(timeout)}"))
        return query

    @staticmethod
    def query_logs(db: Session, filters: ActivityLogFilters) -> ActivityLogPage:
        """Query activity logs with filters and pagination, most recent first.

        Plain page views are always excluded. ``search`` matches any text
        column of the entry, the acting user's name or email, or the name or
        slug of the user's type.
        """
        query = (
            db.query(ActivityLog)
            .outerjoin(ActivityLog.user)
            .outerjoin(User.user_type)
            .filter(ActivityLog.activity != ActivityKind.VIEW.value)
        )
        query = AuditService.apply_read_timeout(db, query)

        if filters.status:
            query = query.filter(ActivityLog.status == filters.status)
        if filters.search:
            pattern = "%" + _escape_like(filters.search) + "%"
            query = query.filter(or_(*[
                column.ilike(pattern, escape="\\")
                for column in (
                    ActivityLog.route_name,
                    ActivityLog.path,
                    ActivityLog.activity,
                    ActivityLog.status,
                    ActivityLog.description,
                    ActivityLog.ip_address,
                    ActivityLog.user_agent,
                    User.name,
                    User.email,
                    UserType.name,
                    UserType.slug,
                )
            ]))
        if filters.date_from:
            query = query.filter(
                ActivityLog.created_at >= _day_start(db, filters.date_from)
            )
        if filters.date_to:
            query = query.filter(
                ActivityLog.created_at < _day_start(db, filters.date_to + timedelta(days=1))
            )

        total = query.count()
        logs = (
            query.options(contains_eager(ActivityLog.user).contains_eager(User.user_type))
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .offset((filters.page - 1) * filters.per_page)
            .limit(filters.per_page)
            .all()
        )

        return ActivityLogPage(
            logs=[AuditService.to_view(log) for log in logs],
            total=total,
            page=filters.page,
            per_page=filters.per_page,
            last_page=max(1, math.ceil(total / filters.per_page)),
            filters=filters.echo(),
        )


def _day_start(db: Session, day):
    """Midnight of ``day`` as a ``created_at`` bound.

    SQLite keeps DATETIME as text and compares it as text, so the bound is
    rendered without fractional seconds to order correctly against both
    ``YYYY-MM-DD HH:MM:SS`` and ``YYYY-MM-DD HH:MM:SS.ffffff`` values.
    """
    moment = datetime.combine(day, time.min)
    if db.get_bind().dialect.name == "sqlite":
        return literal(moment.strftime("%Y-%m-%d %H:%M:%S"), String)
    return moment


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


audit_service = AuditService()
