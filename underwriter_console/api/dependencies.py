"""Dependency injection for FastAPI endpoints"""

from typing import Callable, Optional

from fastapi import Depends, Request

from underwriter_console.core.console import Console
from underwriter_console.core.navigation import GuardAction, RouteSpec
from underwriter_console.domain.models import Session


class PageRedirect(Exception):
    """Guard sent the browser elsewhere"""

    def __init__(self, location: str):
        self.location = location


class AccessDenied(Exception):
    """Signed in, but the role may not open this page"""

    def __init__(self, route: RouteSpec):
        self.route = route


def get_console(request: Request) -> Console:
    """Provide the process-wide console"""
    return request.app.state.console


def require_route(route_name: str) -> Callable[..., Optional[Session]]:
    """Dependency running the navigation guard for one route"""

    def guard(console: Console = Depends(get_console)) -> Optional[Session]:
        # A forced logout since the last request wins over whatever was asked for
        forced = console.navigator.consume_forced_redirect()
        if forced is not None:
            raise PageRedirect(forced)

        session = console.sessions.current_session()
        outcome = console.guard.check(route_name, session)
        if outcome.action is GuardAction.REDIRECT:
            raise PageRedirect(outcome.location)
        if outcome.action is GuardAction.DENY:
            raise AccessDenied(outcome.route)
        console.navigator.navigate(outcome.route.path)
        return session

    return guard


def redirect_if_forced(console: Console) -> None:
    """Raise a redirect when a backend call just invalidated the session"""
    forced = console.navigator.consume_forced_redirect()
    if forced is not None:
        raise PageRedirect(forced)
