"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from activity_audit.core.config import settings
from activity_audit.services.classification import Outcome


# ---- Auth ----
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=4)
    password: str = Field(..., min_length=4)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None


# ---- User ----
class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Optional[str] = None
    categories: List[str] = []
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Activity log ----
class ActivityLogUser(BaseModel):
    name: str
    role: Optional[str] = None

class ActivityLogOut(BaseModel):
    id: int
    page: str
    page_href: str
    user: ActivityLogUser
    activity: str
    description: Optional[str] = None
    status: str
    ip: Optional[str] = None
    device: Optional[str] = None
    timestamp: Optional[str] = None


class ActivityLogFilters(BaseModel):
    """Listing filters, normalized instead of rejected.

    Unknown statuses, blank searches and malformed dates are dropped,
    ``per_page`` is clamped and ``page`` never goes below 1.
    """

    status: Optional[str] = None
    search: Optional[str] = None
    date_from: Optional[date] = Field(None, alias="from")
    date_to: Optional[date] = Field(None, alias="to")
    per_page: int = settings.AUDIT_DEFAULT_PER_PAGE
    page: int = 1

    class Config:
        populate_by_name = True

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value):
        if value is None:
            return None
        if isinstance(value, Outcome):
            return value.value
        value = str(value).strip().lower()
        if value not in {outcome.value for outcome in Outcome}:
            return None
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value[:255] or None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if value is None or isinstance(value, date):
            return value.date() if isinstance(value, datetime) else value
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            return None

    @field_validator("per_page", mode="before")
    @classmethod
    def _clamp_per_page(cls, value):
        try:
            per_page = int(value)
        except (TypeError, ValueError):
            return settings.AUDIT_DEFAULT_PER_PAGE
        return max(settings.AUDIT_MIN_PER_PAGE, min(settings.AUDIT_MAX_PER_PAGE, per_page))

    @field_validator("page", mode="before")
    @classmethod
    def _first_page(cls, value):
        try:
            page = int(value)
        except (TypeError, ValueError):
            return 1
        return max(1, page)

    @model_validator(mode="after")
    def _ordered_range(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            self.date_from, self.date_to = self.date_to, self.date_from
        return self

    def echo(self) -> Dict[str, Any]:
        """Filters as the listing query string names them."""
        return {
            "status": self.status,
            "search": self.search,
            "from": self.date_from.isoformat() if self.date_from else None,
            "to": self.date_to.isoformat() if self.date_to else None,
            "per_page": self.per_page,
        }


class ActivityLogPage(BaseModel):
    logs: List[ActivityLogOut]
    total: int
    page: int
    per_page: int
    last_page: int
    filters: Dict[str, Any]


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None
