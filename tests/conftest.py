"""Fixtures: in-memory SQLite database, users by role, HTTP clients."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-the-activity-audit-suite"

from datetime import datetime

import pytest
from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import RedirectResponse
from fastapi.testclient import TestClient

from activity_audit.api.activity_log import router as activity_log_router
from activity_audit.api.auth import router as auth_router
from activity_audit.core.middleware import setup_middleware
from activity_audit.core.roles import Principal
from activity_audit.core.security import (
    create_access_token, get_current_principal, hash_password,
    require_ched, require_ched_admin, require_participant,
)
from activity_audit.db.base import Base
from activity_audit.db.session import SessionLocal, engine
from activity_audit.main import app
from activity_audit.models import ActivityLog, User, UserType

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_types(db):
    types = {
        "ched": UserType(name="CHED", slug="ched", sequence_order=1),
        "ched-lo": UserType(name="CHED LO", slug="ched-lo", sequence_order=2),
        "participant": UserType(name="Participant", slug="participant", sequence_order=3),
    }
    db.add_all(types.values())
    db.commit()
    return types


@pytest.fixture
def make_user(db, user_types):
    """Factory creating a user attached to one of the seeded user types."""
    counter = {"n": 0}

    def _make(name=None, email=None, user_type="participant", is_active=True):
        counter["n"] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            hashed_password=hash_password(PASSWORD),
            is_active=is_active,
            user_type_id=user_types[user_type].id if user_type else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def ched_admin(make_user):
    return make_user(name="Carla Admin", email="carla@ched.gov", user_type="ched")


@pytest.fixture
def ched_lo(make_user):
    return make_user(name="Leo Liaison", email="leo@ched.gov", user_type="ched-lo")


@pytest.fixture
def participant(make_user):
    return make_user(name="Paula Participant", email="paula@example.com", user_type="participant")


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def add_log(db):
    """Factory inserting an activity log row directly, bypassing the recorder."""

    def _add(user=None, activity="create", status="success", created_at=None, **fields) -> ActivityLog:
        entry = ActivityLog(
            user_id=user.id if user else None,
            route_name=fields.pop("route_name", "programmes.store"),
            path=fields.pop("path", "/programmes"),
            method=fields.pop("method", "POST"),
            activity=activity,
            status=status,
            description=fields.pop("description", "Create Programmes / Store."),
            ip_address=fields.pop("ip_address", "10.0.0.1"),
            user_agent=fields.pop("user_agent", "pytest-agent"),
            created_at=created_at or datetime(2026, 1, 10, 12, 0, 0),
            **fields,
        )
        db.add(entry)
        db.commit()
        return entry

    return _add


programmes = APIRouter(prefix="/programmes", tags=["programmes"])


@programmes.get("", name="programmes.index")
async def programmes_index(principal: Principal = Depends(get_current_principal)):
    return {"programmes": []}


@programmes.post("/{programme_id}/approve", name="programmes.approve")
async def programmes_approve(programme_id: int, principal: Principal = Depends(require_ched_admin)):
    return {"approved": programme_id}


@programmes.post("/{programme_id}/reject", name="programmes.reject")
async def programmes_reject(programme_id: int, principal: Principal = Depends(require_ched)):
    return {"rejected": programme_id}


@programmes.get("/export", name="programmes.export")
async def programmes_export(principal: Principal = Depends(require_ched_admin)):
    return {"rows": []}


@programmes.post("/{programme_id}/join", name="event-list.join")
async def event_list_join(programme_id: int, principal: Principal = Depends(require_participant)):
    return {"joined": programme_id}


@programmes.get("/legacy", name="programmes.legacy")
async def programmes_legacy(principal: Principal = Depends(get_current_principal)):
    return RedirectResponse("/programmes", status_code=302)


@programmes.get("/broken", name="programmes.broken")
async def programmes_broken(principal: Principal = Depends(get_current_principal)):
    raise RuntimeError("boom")


def build_app() -> FastAPI:
    """The real middleware and routers plus a small programmes surface."""
    test_app = FastAPI()
    setup_middleware(test_app)
    test_app.include_router(auth_router, prefix="/api")
    test_app.include_router(activity_log_router, prefix="/api")
    test_app.include_router(programmes)
    return test_app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def programmes_client():
    return TestClient(build_app(), raise_server_exceptions=False, follow_redirects=False)
