"""Role categories derived from a user's user type.

A principal's categories are computed once when the principal is loaded and
then only queried for membership. CHED_ADMIN is the union of CHED and
CHED_LO, so a principal can hold several categories at the same time.
"""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


class RoleCategory(str, enum.Enum):
    CHED = "ched"
    CHED_LO = "ched_lo"
    CHED_ADMIN = "ched_admin"
    OTHER = "other"


def classify_role(name: Optional[str], slug: Optional[str]) -> FrozenSet[RoleCategory]:
    """Return every category satisfied by a user type's name and slug."""
    role_name = (name or "").strip().upper()
    role_slug = (slug or "").strip().upper()

    categories = set()
    if "CHED" in (role_name, role_slug):
        categories.add(RoleCategory.CHED)
    if role_name == "CHED LO" or role_slug == "CHED-LO":
        categories.add(RoleCategory.CHED_LO)
    if categories:
        categories.add(RoleCategory.CHED_ADMIN)
    else:
        categories.add(RoleCategory.OTHER)
    return frozenset(categories)


@dataclass(frozen=True)
class Principal:
    """Authenticated actor of a request, detached from the ORM session."""

    id: int
    name: str
    email: str
    role_name: Optional[str] = None
    role_slug: Optional[str] = None
    categories: FrozenSet[RoleCategory] = field(default=frozenset())

    @classmethod
    def from_user(cls, user) -> "Principal":
        user_type = user.user_type
        role_name = user_type.name if user_type else None
        role_slug = user_type.slug if user_type else None
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role_name=role_name,
            role_slug=role_slug,
            categories=classify_role(role_name, role_slug),
        )

    def has(self, category: RoleCategory) -> bool:
        return category in self.categories


def categories_for(principal: Optional[Principal]) -> FrozenSet[RoleCategory]:
    """Categories of a possibly missing principal; empty when there is none."""
    if principal is None:
        return frozenset()
    return principal.categories
