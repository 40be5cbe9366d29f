"""Seed default user types into the database."""

from sqlalchemy.orm import Session
from activity_audit.models.user_type import UserType


def seed_user_types(db: Session) -> None:
    """Insert default user types if they don't already exist."""
    user_types_data = [
        {"name": "CHED", "slug": "ched", "sequence_order": 1},
        {"name": "CHED LO", "slug": "ched-lo", "sequence_order": 2},
        {"name": "Participant", "slug": "participant", "sequence_order": 3},
    ]

    for user_type_data in user_types_data:
        existing = db.query(UserType).filter(UserType.slug == user_type_data["slug"]).first()
        if not existing:
            db.add(UserType(**user_type_data))

    db.commit()
    print(f"Seeded {len(user_types_data)} user types")
