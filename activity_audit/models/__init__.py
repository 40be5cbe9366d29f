"""Models package — import all models so metadata.create_all can discover them."""

from activity_audit.models.user_type import UserType
from activity_audit.models.user import User
from activity_audit.models.activity_log import ActivityLog

__all__ = ["UserType", "User", "ActivityLog"]
