"""Activity and outcome classification for audited requests.

Both functions are pure: the activity depends only on the route name and the
HTTP method, the outcome only on the status code and the activity.
"""

import enum
from typing import Callable, List, Optional, Tuple


class ActivityKind(str, enum.Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    EXPORT = "export"
    APPROVE = "approve"
    REJECT = "reject"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    VIEW = "view"


class Outcome(str, enum.Enum):
    FAILED = "failed"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


def _route_contains(keyword: str) -> Callable[[str, str], bool]:
    def predicate(route_name: str, method: str) -> bool:
        return keyword in route_name
    predicate.__name__ = f"route_contains_{keyword}"
    return predicate


def _method_in(*methods: str) -> Callable[[str, str], bool]:
    def predicate(route_name: str, method: str) -> bool:
        return method in methods
    predicate.__name__ = f"method_in_{'_'.join(methods).lower()}"
    return predicate


# Evaluated top to bottom, first match wins. Route keywords carry the intent of
# the endpoint and take precedence over the method fallback.
ACTIVITY_RULES: List[Tuple[Callable[[str, str], bool], ActivityKind]] = [
    (_route_contains("login"), ActivityKind.LOGIN),
    (_route_contains("logout"), ActivityKind.LOGOUT),
    (_route_contains("export"), ActivityKind.EXPORT),
    (_route_contains("approve"), ActivityKind.APPROVE),
    (_route_contains("reject"), ActivityKind.REJECT),
    (_method_in("POST"), ActivityKind.CREATE),
    (_method_in("PUT", "PATCH"), ActivityKind.UPDATE),
    (_method_in("DELETE"), ActivityKind.DELETE),
]


def classify_activity(route_name: Optional[str], method: Optional[str]) -> ActivityKind:
    """Map a route name and HTTP method to the kind of activity performed."""
    normalized_route = (route_name or "").lower()
    normalized_method = (method or "").upper()
    for predicate, kind in ACTIVITY_RULES:
        if predicate(normalized_route, normalized_method):
            return kind
    return ActivityKind.VIEW


def resolve_status(status_code: int, activity: ActivityKind) -> Outcome:
    """Bucket a response status code into an audit outcome."""
    if status_code >= 400:
        return Outcome.FAILED
    if status_code >= 300:
        return Outcome.WARNING
    if activity == ActivityKind.VIEW:
        return Outcome.INFO
    return Outcome.SUCCESS
