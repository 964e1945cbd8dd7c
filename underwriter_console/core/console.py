"""Wiring of session, clients, controllers and navigation for one console process"""

import logging
from typing import Dict, Optional

import httpx
from sqlalchemy.orm import sessionmaker

from underwriter_console.config import Settings, settings
from underwriter_console.core.detail import DetailController, user_profile_loader
from underwriter_console.core.list_view import ListViewController
from underwriter_console.core.navigation import DASHBOARD_PATH, LOGIN_PATH, NavigationGuard, Navigator
from underwriter_console.core.session_store import SessionStore
from underwriter_console.domain.models import Session
from underwriter_console.infrastructure.clients.applications import ApplicationsClient
from underwriter_console.infrastructure.clients.auth import AuthClient
from underwriter_console.infrastructure.clients.bvn import BVNClient
from underwriter_console.infrastructure.clients.selfies import SelfiesClient
from underwriter_console.infrastructure.clients.users import LoanAnalysisClient, UsersClient

logger = logging.getLogger(__name__)


class Console:
    """
    Everything one signed-in operator works with.

    The session is process-wide; list and detail controllers are rebuilt
    on every login and logout so no state leaks between operators.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or settings
        self.config = config
        self.guard = NavigationGuard()
        self.navigator = Navigator()

        timeout = config.http_timeout_seconds
        self.sessions = SessionStore(
            session_factory,
            AuthClient(config.auth_api_base, timeout=timeout, transport=transport),
        )

        client_options = {
            "token_provider": self.sessions.token,
            "on_unauthorized": self.invalidate_session,
            "timeout": timeout,
            "transport": transport,
        }
        self.applications_client = ApplicationsClient(config.credit_api_base, **client_options)
        self.bvn_client = BVNClient(config.bvn_api_base, **client_options)
        self.selfies_client = SelfiesClient(config.selfie_api_base, **client_options)
        self.users_client = UsersClient(config.user_api_base, **client_options)
        self.loan_analysis_client = LoanAnalysisClient(config.loanbot_api_base, **client_options)

        self.lists: Dict[str, ListViewController] = {}
        self.details: Dict[str, DetailController] = {}
        self.reset_views()

    def reset_views(self) -> None:
        page_size = self.config.default_page_size
        options = self.config.page_size_options

        applications = ListViewController(
            "applications",
            self.applications_client.list_applications,
            search_fields=ApplicationsClient.search_fields,
            filters=ApplicationsClient.filters,
            page_size=page_size,
            page_size_options=options,
        )
        self.lists = {
            "applications": applications,
            "bvn": ListViewController(
                "bvn",
                self.bvn_client.list_records,
                search_fields=BVNClient.search_fields,
                filters=BVNClient.filters,
                page_size=page_size,
                page_size_options=options,
            ),
            "selfie": ListViewController(
                "selfie",
                self.selfies_client.list_selfies,
                page_size=page_size,
                page_size_options=options,
            ),
        }
        self.details = {
            "applications": DetailController(
                "application",
                self.applications_client.get_application,
                not_found_message="Application not found",
            ),
            "bvn": DetailController(
                "bvn record",
                self.bvn_client.get_record,
                not_found_message="BVN record not found",
            ),
            "users": DetailController(
                "user profile",
                user_profile_loader(self.users_client, self.loan_analysis_client),
                submitter=self.users_client.submit_decision,
                origin=applications,
                not_found_message="User not found",
            ),
        }

    async def login(self, email: str, password: str) -> Session:
        session = await self.sessions.login(email, password)
        self.reset_views()
        self.navigator.navigate(DASHBOARD_PATH)
        return session

    def logout(self) -> None:
        self.sessions.logout()
        self.reset_views()
        self.navigator.navigate(LOGIN_PATH)

    def invalidate_session(self) -> None:
        """Called by resource clients on 401/403"""
        logger.warning("Forcing logout after backend rejected the session")
        self.sessions.logout()
        self.reset_views()
        self.navigator.force_login()
