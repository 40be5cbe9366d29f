"""Auth service — credential check and JWT issuing."""

from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from sqlalchemy.orm import Session

from activity_audit.core.exceptions import AuthenticationError, ResourceNotFoundError
from activity_audit.core.roles import Principal
from activity_audit.core.security import create_access_token, verify_password
from activity_audit.models.user import User


class AuthService:
    """Handles authentication of registered users."""

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Tuple[Principal, Dict[str, Any]]:
        """Authenticate a user and return its principal with a JWT token response.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationError("These credentials do not match our records.")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        principal = Principal.from_user(user)
        access_token = create_access_token({
            "sub": str(user.id),
            "email": user.email,
            "role": principal.role_slug,
        })

        user.last_login_at = datetime.now(timezone.utc)
        db.commit()

        return principal, {
            "access_token": access_token,
            "token_type": "bearer",
            "user": {
                "id": principal.id,
                "email": principal.email,
                "name": principal.name,
                "role": principal.role_slug,
                "categories": sorted(category.value for category in principal.categories),
            },
        }

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user


auth_service = AuthService()
