"""Activity log API router."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from activity_audit.db.session import get_db
from activity_audit.core.config import settings
from activity_audit.core.roles import Principal
from activity_audit.core.security import require_ched_admin
from activity_audit.schemas.schemas import ActivityLogFilters, ActivityLogPage
from activity_audit.services.audit_service import audit_service

router = APIRouter(prefix="/settings", tags=["activity-log"])


@router.get(
    "/activity-log",
    response_model=ActivityLogPage,
    name=settings.AUDIT_LOG_ROUTE_NAME,
)
def list_activity_logs(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    per_page: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_ched_admin),
):
    """Search the activity log (CHED admins only).

    Malformed parameters fall back to their defaults instead of failing.
    """
    filters = ActivityLogFilters(
        status=status,
        search=search,
        date_from=date_from,
        date_to=date_to,
        per_page=per_page,
        page=page,
    )
    return audit_service.query_logs(db, filters)
