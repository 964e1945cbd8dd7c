"""Guarded pages without list state of their own"""

from fastapi import APIRouter, Depends

from underwriter_console.api.dependencies import (
    AccessDenied,
    PageRedirect,
    get_console,
    redirect_if_forced,
    require_route,
)
from underwriter_console.core.console import Console
from underwriter_console.core.navigation import GuardAction
from underwriter_console.domain.models import Session

router = APIRouter()


def _section(view: str, session: Session) -> dict:
    return {"view": view, "user": session.display_name, "role": session.role.value}


@router.get("/")
def dashboard(session: Session = Depends(require_route("dashboard"))):
    return _section("dashboard", session)


@router.get("/location")
def location(session: Session = Depends(require_route("location"))):
    return _section("location", session)


@router.get("/bank-statement")
def bank_statement(session: Session = Depends(require_route("bank_statement"))):
    return _section("bank_statement", session)


@router.get("/audit")
def audit(session: Session = Depends(require_route("audit"))):
    """Audit trail; admins and senior underwriters only"""
    return _section("audit", session)


@router.get("/{path:path}", include_in_schema=False)
def unknown_page(path: str, console: Console = Depends(get_console)):
    """Anything unmatched goes to the dashboard, or to login when signed out"""
    redirect_if_forced(console)
    outcome = console.guard.resolve("/" + path, console.sessions.current_session())
    if outcome.action is GuardAction.DENY:
        raise AccessDenied(outcome.route)
    if outcome.action is GuardAction.REDIRECT:
        raise PageRedirect(outcome.location)
    # A known page reached with a trailing slash
    raise PageRedirect("/" + path.rstrip("/"))
