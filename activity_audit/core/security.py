"""JWT authentication and role-gate authorization helpers."""

import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from activity_audit.core.config import settings
from activity_audit.core.exceptions import RoleConfigurationError, forbidden, unauthorized
from activity_audit.core.roles import Principal, RoleCategory
from activity_audit.db.session import get_db
from activity_audit.models.user import User

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pwd_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def load_principal(db: Session, user_id: int) -> Optional[Principal]:
    """Load an active user and classify its role once."""
    user = db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712
    if not user:
        return None
    return Principal.from_user(user)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_principal(request: Request, db: Session) -> Optional[Principal]:
    """Return the request's principal, or None when it is anonymous.

    Never raises for missing or invalid credentials; used after the response
    has already been produced.
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return principal

    token = _bearer_token(request)
    if token is None:
        return None
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        return None
    try:
        return load_principal(db, int(user_id))
    except ValueError:
        return None


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """Resolve the principal from the JWT Bearer token or fail with 401."""
    if credentials is None:
        raise unauthorized()
    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise unauthorized("Invalid token payload")
    try:
        principal = load_principal(db, int(user_id))
    except ValueError:
        raise unauthorized("Invalid token payload")
    if principal is None:
        raise unauthorized()
    request.state.principal = principal
    return principal


# Role names accepted by RequireRole; participant is an exclusion rule
ROLE_CATEGORIES = {
    "ched": RoleCategory.CHED,
    "ched_lo": RoleCategory.CHED_LO,
    "ched_admin": RoleCategory.CHED_ADMIN,
}
PARTICIPANT = "participant"
REQUIRED_ROLES = frozenset(ROLE_CATEGORIES) | {PARTICIPANT}


def authorize(principal: Optional[Principal], required_role: str) -> bool:
    """Return True when the principal may access a surface gated by required_role."""
    if required_role not in REQUIRED_ROLES:
        raise RoleConfigurationError(f"Unknown role '{required_role}'")
    if principal is None:
        return False
    if required_role == PARTICIPANT:
        return not principal.has(RoleCategory.CHED_ADMIN)
    return principal.has(ROLE_CATEGORIES[required_role])


class RequireRole:
    """Dependency that checks the principal against a required role.

    The role name is validated when the dependency is built, so a typo fails
    at import time instead of on every request.
    """

    def __init__(self, role: str):
        if role not in REQUIRED_ROLES:
            raise RoleConfigurationError(
                f"Unknown role '{role}'. Expected one of: {', '.join(sorted(REQUIRED_ROLES))}"
            )
        self.role = role

    async def __call__(
        self,
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not authorize(principal, self.role):
            raise forbidden()
        return principal


# Convenience dependency factories
require_ched = RequireRole("ched")
require_ched_lo = RequireRole("ched_lo")
require_ched_admin = RequireRole("ched_admin")
require_participant = RequireRole("participant")
