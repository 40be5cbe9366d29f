"""Activity classifier and status resolver tests."""

import pytest

from activity_audit.services.classification import (
    ACTIVITY_RULES, ActivityKind, Outcome, classify_activity, resolve_status,
)


@pytest.mark.parametrize("route_name,method,expected", [
    ("login.store", "POST", ActivityKind.LOGIN),
    ("logout", "POST", ActivityKind.LOGOUT),
    ("reports.export", "GET", ActivityKind.EXPORT),
    ("programmes.approve", "POST", ActivityKind.APPROVE),
    ("programmes.reject", "PATCH", ActivityKind.REJECT),
    ("programmes.store", "POST", ActivityKind.CREATE),
    ("programmes.update", "PUT", ActivityKind.UPDATE),
    ("programmes.update", "PATCH", ActivityKind.UPDATE),
    ("programmes.destroy", "DELETE", ActivityKind.DELETE),
    ("programmes.index", "GET", ActivityKind.VIEW),
    ("programmes.index", "HEAD", ActivityKind.VIEW),
])
def test_classify_activity(route_name, method, expected):
    assert classify_activity(route_name, method) == expected


def test_route_keywords_are_case_insensitive():
    assert classify_activity("Auth.LOGIN", "get") == ActivityKind.LOGIN
    assert classify_activity("reports.Export-CSV", "post") == ActivityKind.EXPORT


def test_earlier_keyword_wins():
    # login precedes export and approve in the rule order
    assert classify_activity("login.export", "GET") == ActivityKind.LOGIN
    assert classify_activity("export.approve", "POST") == ActivityKind.EXPORT
    assert classify_activity("approve.reject", "DELETE") == ActivityKind.APPROVE


def test_keyword_beats_method():
    assert classify_activity("login.store", "POST") == ActivityKind.LOGIN
    assert classify_activity("participants.reject", "DELETE") == ActivityKind.REJECT


@pytest.mark.parametrize("route_name", [None, ""])
def test_missing_route_falls_back_to_method(route_name):
    assert classify_activity(route_name, "POST") == ActivityKind.CREATE
    assert classify_activity(route_name, "GET") == ActivityKind.VIEW


def test_rule_order_is_explicit():
    kinds = [kind for _, kind in ACTIVITY_RULES]
    assert kinds[:5] == [
        ActivityKind.LOGIN, ActivityKind.LOGOUT, ActivityKind.EXPORT,
        ActivityKind.APPROVE, ActivityKind.REJECT,
    ]


def test_classification_is_deterministic():
    inputs = [("programmes.approve", "POST"), (None, "PUT"), ("x.logout", "GET")]
    first = [classify_activity(*pair) for pair in inputs]
    second = [classify_activity(*pair) for pair in reversed(inputs)]
    assert first == list(reversed(second))


@pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422, 500, 503])
@pytest.mark.parametrize("activity", list(ActivityKind))
def test_client_and_server_errors_fail(status_code, activity):
    assert resolve_status(status_code, activity) == Outcome.FAILED


@pytest.mark.parametrize("status_code", [300, 301, 302, 304, 399])
@pytest.mark.parametrize("activity", list(ActivityKind))
def test_redirects_warn(status_code, activity):
    assert resolve_status(status_code, activity) == Outcome.WARNING


def test_views_are_informational():
    assert resolve_status(200, ActivityKind.VIEW) == Outcome.INFO


def test_completed_changes_succeed():
    assert resolve_status(201, ActivityKind.CREATE) == Outcome.SUCCESS
    assert resolve_status(200, ActivityKind.APPROVE) == Outcome.SUCCESS
    assert resolve_status(204, ActivityKind.DELETE) == Outcome.SUCCESS
