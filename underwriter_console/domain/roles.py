"""Mapping backend role slugs onto console roles"""

from typing import Any, Dict, Sequence

from underwriter_console.domain.models import Role


def role_from_slug(slug: str) -> Role:
    """
    Map one backend role slug to a console role.

    Order matters: a slug such as "senior_admin" is an ADMIN.
    """
    slug = (slug or "").lower()
    if "admin" in slug:
        return Role.ADMIN
    if "senior" in slug or "supervisor" in slug:
        return Role.SENIOR_UNDERWRITER
    if "analyst" in slug:
        return Role.ANALYST
    return Role.UNDERWRITER


def role_from_backend_roles(roles: Sequence[Dict[str, Any]]) -> Role:
    """Only the first role counts; no roles at all means UNDERWRITER"""
    if not roles:
        return Role.UNDERWRITER
    return role_from_slug(roles[0].get("slug", ""))
