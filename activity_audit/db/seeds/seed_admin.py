"""Seed the CHED admin user from env vars."""

from sqlalchemy.orm import Session
from activity_audit.models.user import User
from activity_audit.models.user_type import UserType
from activity_audit.core.security import hash_password
from activity_audit.core.config import settings


def seed_admin(db: Session) -> None:
    """Create the CHED admin user if not already present."""
    ched_type = db.query(UserType).filter(UserType.slug == "ched").first()
    if not ched_type:
        print("CHED user type not found. Run seed_user_types first.")
        return

    existing = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if existing:
        print(f"Admin '{settings.ADMIN_EMAIL}' already exists, skipping.")
        return

    admin = User(
        email=settings.ADMIN_EMAIL,
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
        name=settings.ADMIN_NAME,
        is_active=True,
        user_type_id=ched_type.id,
    )
    db.add(admin)
    db.commit()
    print(f"Created admin: {settings.ADMIN_EMAIL}")
