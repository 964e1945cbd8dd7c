"""Login, logout and the signed-in operator"""

from fastapi import APIRouter, Depends, HTTPException

from underwriter_console.api.dependencies import PageRedirect, get_console, require_route
from underwriter_console.api.pages.schemas import LoginRequest, NavigationResponse, SessionResponse
from underwriter_console.core.console import Console
from underwriter_console.core.navigation import ROUTES, GuardAction
from underwriter_console.domain.exceptions import AuthError
from underwriter_console.domain.models import Session

router = APIRouter()


@router.get("/login")
def login_page(session: Session = Depends(require_route("login"))):
    """Login screen; signed-in operators are sent to the dashboard by the guard"""
    return {"view": "login"}


@router.post("/login", response_model=SessionResponse)
async def login(body: LoginRequest, console: Console = Depends(get_console)):
    """
    Sign in against the auth service.

    Errors:
        302 to the dashboard when already signed in
        422 for unusable form input (nothing is sent to the backend)
        401 with the backend's reason when the login is refused
    """
    outcome = console.guard.check("login", console.sessions.current_session())
    if outcome.action is GuardAction.REDIRECT:
        raise PageRedirect(outcome.location)

    try:
        session = await console.login(body.email, body.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)

    return SessionResponse.from_session(session)


@router.post("/logout")
def logout(console: Console = Depends(get_console)):
    console.logout()
    return {"status": "signed_out"}


@router.get("/session", response_model=SessionResponse)
def current_session(session: Session = Depends(require_route("dashboard"))):
    return SessionResponse.from_session(session)


@router.get("/navigation", response_model=NavigationResponse)
def navigation(
    session: Session = Depends(require_route("dashboard")),
    console: Console = Depends(get_console),
):
    """Sidebar entries for the operator's role"""
    paths = {name: route.path for name, route in ROUTES.items()}
    return NavigationResponse.from_items(console.guard.visible_navigation(session), paths)
