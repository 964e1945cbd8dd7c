"""Route table, role-gated navigation guard and navigator"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Pattern

from underwriter_console.domain.models import Role, Session

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/"


@dataclass(frozen=True)
class RouteSpec:
    name: str
    path: str
    required_roles: FrozenSet[Role] = frozenset()
    public: bool = False

    @property
    def pattern(self) -> Pattern[str]:
        return re.compile("^" + re.sub(r"\{[^/]+\}", "[^/]+", self.path) + "/?$")


ROUTES: Dict[str, RouteSpec] = {
    route.name: route
    for route in (
        RouteSpec("login", LOGIN_PATH, public=True),
        RouteSpec("dashboard", DASHBOARD_PATH),
        RouteSpec("applications", "/applications"),
        RouteSpec("application_details", "/applications/{id}"),
        RouteSpec("bvn", "/bvn"),
        RouteSpec("bvn_details", "/bvn/{bvn}"),
        RouteSpec("selfie", "/selfie"),
        RouteSpec("location", "/location"),
        RouteSpec("bank_statement", "/bank-statement"),
        RouteSpec("audit", "/audit", required_roles=frozenset({Role.ADMIN, Role.SENIOR_UNDERWRITER})),
        RouteSpec("user_profile", "/users/{user_id}"),
    )
}


@dataclass(frozen=True)
class NavigationItem:
    label: str
    route: str
    icon: str


NAVIGATION_ITEMS = (
    NavigationItem("Dashboard", "dashboard", "dashboard"),
    NavigationItem("Applications", "applications", "applications"),
    NavigationItem("BVN Verification", "bvn", "bvn"),
    NavigationItem("Selfie Verification", "selfie", "selfie"),
    NavigationItem("Location Records", "location", "location"),
    NavigationItem("Bank Statements", "bank_statement", "bank"),
    NavigationItem("Audit Trail", "audit", "audit"),
)


class GuardAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


@dataclass(frozen=True)
class GuardOutcome:
    action: GuardAction
    route: Optional[RouteSpec] = None
    location: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.action is GuardAction.ALLOW


class NavigationGuard:
    """
    Decides per route whether the current session may see it.

    "Not signed in" is a redirect to login. "Signed in without the role"
    is a terminal access-denied outcome, never a redirect.
    """

    def __init__(self, routes: Optional[Dict[str, RouteSpec]] = None):
        self.routes = routes or ROUTES

    def check(self, route_name: str, session: Optional[Session]) -> GuardOutcome:
        route = self.routes[route_name]
        authenticated = session is not None and session.is_authenticated

        if route.public:
            if authenticated and route.path == LOGIN_PATH:
                return GuardOutcome(GuardAction.REDIRECT, route, DASHBOARD_PATH)
            return GuardOutcome(GuardAction.ALLOW, route)

        if not authenticated:
            return GuardOutcome(GuardAction.REDIRECT, route, LOGIN_PATH)

        if route.required_roles and session.role not in route.required_roles:
            logger.info(
                "Access denied",
                extra={"route": route.name, "user_id": session.user_id, "role": session.role.value},
            )
            return GuardOutcome(GuardAction.DENY, route)

        return GuardOutcome(GuardAction.ALLOW, route)

    def match(self, path: str) -> Optional[RouteSpec]:
        for route in self.routes.values():
            if route.pattern.match(path):
                return route
        return None

    def resolve(self, path: str, session: Optional[Session]) -> GuardOutcome:
        """Guard a concrete path; unknown paths fall back to dashboard or login"""
        route = self.match(path)
        if route is None:
            authenticated = session is not None and session.is_authenticated
            return GuardOutcome(GuardAction.REDIRECT, None, DASHBOARD_PATH if authenticated else LOGIN_PATH)
        return self.check(route.name, session)

    def visible_navigation(self, session: Optional[Session]) -> List[NavigationItem]:
        """Sidebar entries the session may open"""
        if session is None:
            return []
        return [item for item in NAVIGATION_ITEMS if self.check(item.route, session).allowed]


class Navigator:
    """Current location, plus a pending forced redirect raised outside the view layer"""

    def __init__(self, location: str = DASHBOARD_PATH):
        self.location = location
        self._forced: Optional[str] = None

    def navigate(self, path: str) -> None:
        self.location = path

    def force_login(self) -> None:
        self.location = LOGIN_PATH
        self._forced = LOGIN_PATH

    def consume_forced_redirect(self) -> Optional[str]:
        """Return and clear a pending forced redirect"""
        forced, self._forced = self._forced, None
        return forced
