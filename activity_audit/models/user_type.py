"""User type model, the source of a principal's role category."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from activity_audit.db.base import Base


class UserType(Base):
    """Organizational role assigned to users (e.g. CHED, CHED LO, Participant)."""
    __tablename__ = "user_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    sequence_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
