"""Unit tests for backend role mapping"""

import pytest

from underwriter_console.domain.models import Role
from underwriter_console.domain.roles import role_from_backend_roles, role_from_slug


@pytest.mark.parametrize(
    "slug,expected",
    [
        ("super_admin", Role.ADMIN),
        ("admin", Role.ADMIN),
        ("senior_underwriter", Role.SENIOR_UNDERWRITER),
        ("credit_supervisor", Role.SENIOR_UNDERWRITER),
        ("risk_analyst", Role.ANALYST),
        ("credit_officer", Role.UNDERWRITER),
        ("", Role.UNDERWRITER),
    ],
)
def test_role_from_slug(slug: str, expected: Role):
    """Test backend slug to console role mapping"""
    assert role_from_slug(slug) is expected


def test_admin_wins_over_senior():
    """A slug mentioning both is an admin"""
    assert role_from_slug("senior_admin") is Role.ADMIN


def test_slug_matching_ignores_case():
    """Test slug matching ignores case"""
    assert role_from_slug("Super_Admin") is Role.ADMIN


def test_only_first_backend_role_counts():
    """Test only first backend role counts"""
    roles = [{"slug": "credit_officer"}, {"slug": "super_admin"}]
    assert role_from_backend_roles(roles) is Role.UNDERWRITER


def test_no_backend_roles_defaults_to_underwriter():
    """Test no backend roles defaults to underwriter"""
    assert role_from_backend_roles([]) is Role.UNDERWRITER
