"""Activity log model — append-only."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from activity_audit.db.base import Base


class ActivityLog(Base):
    """One classified request performed by an authenticated user.

    This table is APPEND-ONLY: rows are written once by the audit recorder and
    never updated or deleted (enforced at application level; there is no
    update or delete path in the services).
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_user_created", "user_id", "created_at"),
        Index("ix_activity_logs_route_activity", "route_name", "activity"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    route_name = Column(String(255), nullable=True)
    path = Column(String(2048), nullable=False)
    method = Column(String(10), nullable=False)
    activity = Column(String(20), nullable=False)  # login, export, approve, create, view, ...
    status = Column(String(20), nullable=False, index=True)  # failed, warning, info, success
    description = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    # Naive UTC from Python; the server default covers rows inserted outside the ORM
    created_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    user = relationship("User", lazy="select")
