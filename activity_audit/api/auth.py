"""Auth API router — login, logout, me."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from activity_audit.db.session import get_db
from activity_audit.schemas.schemas import LoginRequest, TokenResponse, UserOut, MessageResponse
from activity_audit.services.auth_service import auth_service
from activity_audit.core.roles import Principal
from activity_audit.core.security import get_current_principal
from activity_audit.core.exceptions import AuthenticationError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse, name="login.store")
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate and return a JWT access token."""
    try:
        principal, result = auth_service.authenticate(db, body.email, body.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    # The caller is anonymous until now; expose the principal to the activity log
    request.state.principal = principal
    return result


@router.post("/logout", response_model=MessageResponse, name="logout")
async def logout(principal: Principal = Depends(get_current_principal)):
    """End the session. Tokens are stateless, so the client discards its token."""
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserOut, name="profile.show")
async def get_me(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get current user profile."""
    user = auth_service.get_user(db, principal.id)
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=principal.role_slug,
        categories=sorted(category.value for category in principal.categories),
        is_active=user.is_active,
        created_at=user.created_at,
    )
