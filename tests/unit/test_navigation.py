"""Unit tests for the navigation guard"""

import pytest

from underwriter_console.core.navigation import (
    DASHBOARD_PATH,
    LOGIN_PATH,
    GuardAction,
    NavigationGuard,
    Navigator,
)
from underwriter_console.domain.models import Role, Session


def make_session(role: Role) -> Session:
    return Session(user_id="7", display_name="Test Operator", role=role, token="token-7")


@pytest.fixture
def guard() -> NavigationGuard:
    return NavigationGuard()


def test_unauthenticated_is_redirected_to_login(guard: NavigationGuard):
    """Test unauthenticated is redirected to login"""
    outcome = guard.check("applications", None)
    assert outcome.action is GuardAction.REDIRECT
    assert outcome.location == LOGIN_PATH


def test_session_without_token_counts_as_signed_out(guard: NavigationGuard):
    """Test session without token counts as signed out"""
    session = Session(user_id="7", display_name="x", role=Role.ADMIN, token="")
    assert guard.check("dashboard", session).location == LOGIN_PATH


def test_login_page_is_public(guard: NavigationGuard):
    """Test login route is open to signed-out visitors"""
    assert guard.check("login", None).allowed


def test_signed_in_operator_skips_login_page(guard: NavigationGuard):
    """Test signed in operator skips login page"""
    outcome = guard.check("login", make_session(Role.ANALYST))
    assert outcome.action is GuardAction.REDIRECT
    assert outcome.location == DASHBOARD_PATH


@pytest.mark.parametrize("role", list(Role))
def test_every_role_may_open_ungated_pages(guard: NavigationGuard, role: Role):
    """Test every role may open ungated pages"""
    for route in ("dashboard", "applications", "bvn", "selfie", "user_profile"):
        assert guard.check(route, make_session(role)).allowed


@pytest.mark.parametrize(
    "role,allowed",
    [
        (Role.ADMIN, True),
        (Role.SENIOR_UNDERWRITER, True),
        (Role.UNDERWRITER, False),
        (Role.ANALYST, False),
    ],
)
def test_audit_requires_senior_role(guard: NavigationGuard, role: Role, allowed: bool):
    """Test audit requires senior role"""
    outcome = guard.check("audit", make_session(role))
    if allowed:
        assert outcome.allowed
    else:
        # Denied is terminal, not a redirect
        assert outcome.action is GuardAction.DENY
        assert outcome.location is None


def test_resolve_matches_parameterised_paths(guard: NavigationGuard):
    """Test resolve matches parameterised paths"""
    outcome = guard.resolve("/users/user-001", make_session(Role.UNDERWRITER))
    assert outcome.allowed
    assert outcome.route.name == "user_profile"


def test_resolve_unknown_path_falls_back(guard: NavigationGuard):
    """Test resolve unknown path falls back"""
    assert guard.resolve("/nowhere", None).location == LOGIN_PATH
    assert guard.resolve("/nowhere", make_session(Role.ADMIN)).location == DASHBOARD_PATH


def test_visible_navigation_hides_gated_entries(guard: NavigationGuard):
    """Test visible navigation hides gated entries"""
    underwriter = [item.route for item in guard.visible_navigation(make_session(Role.UNDERWRITER))]
    admin = [item.route for item in guard.visible_navigation(make_session(Role.ADMIN))]

    assert "audit" not in underwriter
    assert "audit" in admin
    assert guard.visible_navigation(None) == []


def test_forced_redirect_is_consumed_once():
    """Test forced redirect is consumed once"""
    navigator = Navigator()
    navigator.navigate("/applications")

    navigator.force_login()

    assert navigator.location == LOGIN_PATH
    assert navigator.consume_forced_redirect() == LOGIN_PATH
    assert navigator.consume_forced_redirect() is None
