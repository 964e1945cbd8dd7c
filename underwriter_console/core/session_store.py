"""Process-wide session store backed by durable local storage"""

import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from underwriter_console.domain.exceptions import AuthError, HttpError, Unauthorized, ValidationError
from underwriter_console.domain.models import Role, Session
from underwriter_console.domain.roles import role_from_backend_roles
from underwriter_console.infrastructure.clients.auth import AuthClient
from underwriter_console.infrastructure.clients.schemas import LoginResponse
from underwriter_console.infrastructure.database.repositories import StorageRepository
from underwriter_console.infrastructure.observability.metrics import login_counter
from underwriter_console.utils.validation import is_valid_email

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "auth_user"
PERMISSIONS_KEY = "user_permissions"
ROLES_KEY = "user_roles"
SESSION_KEYS = (TOKEN_KEY, USER_KEY, PERMISSIONS_KEY, ROLES_KEY)

MIN_PASSWORD_LENGTH = 6


def validate_credentials(email: str, password: str) -> None:
    """Login form checks, run before contacting the auth service"""
    if not email:
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    if not password:
        raise ValidationError("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class SessionStore:
    """
    Holds the authenticated identity and token.

    Token, user, permissions and roles are four storage keys that are
    always written and cleared together, in one transaction.
    """

    def __init__(self, session_factory: sessionmaker, auth_client: AuthClient):
        self.session_factory = session_factory
        self.auth_client = auth_client

    async def login(self, email: str, password: str) -> Session:
        """
        Authenticate against the auth service and persist the session.

        Raises:
            ValidationError: the form input is unusable; nothing was sent
            AuthError: the backend refused the login or could not be reached

        An existing session is left untouched on failure.
        """
        email = (email or "").strip()
        validate_credentials(email, password)

        try:
            response = await self.auth_client.login(email, password)
        except Unauthorized as e:
            login_counter.labels(outcome="failure").inc()
            raise AuthError(e.detail or "Invalid email or password") from e
        except HttpError as e:
            login_counter.labels(outcome="failure").inc()
            raise AuthError(e.message) from e

        if not response.success:
            login_counter.labels(outcome="failure").inc()
            raise AuthError(response.message or "Login failed")
        if not response.token:
            login_counter.labels(outcome="failure").inc()
            raise AuthError("No authentication token received")
        if response.user is None:
            login_counter.labels(outcome="failure").inc()
            raise AuthError("Login response did not include a user")

        session = self._session_from_response(response)
        self._persist(session)
        login_counter.labels(outcome="success").inc()
        logger.info("User signed in", extra={"user_id": session.user_id, "role": session.role.value})
        return session

    def logout(self) -> None:
        """Clear the persisted session; safe to call when signed out"""
        with self.session_factory() as db:
            removed = StorageRepository(db).delete_many(SESSION_KEYS)
            db.commit()
        if removed:
            logger.info("Session cleared")

    def current_session(self) -> Optional[Session]:
        """Read the persisted session, or None when signed out or storage is incomplete"""
        with self.session_factory() as db:
            stored = StorageRepository(db).get_many(SESSION_KEYS)

        token = stored.get(TOKEN_KEY)
        user = stored.get(USER_KEY)
        if not token or not isinstance(user, dict):
            return None

        try:
            role = Role(user.get("role", Role.UNDERWRITER.value))
        except ValueError:
            logger.warning("Stored session has an unknown role; ignoring it", extra={"role": user.get("role")})
            return None

        return Session(
            user_id=str(user.get("id", "")),
            display_name=user.get("displayName", ""),
            role=role,
            token=token,
            email=user.get("email", ""),
            permissions=tuple(stored.get(PERMISSIONS_KEY) or ()),
            roles=tuple(stored.get(ROLES_KEY) or ()),
        )

    def token(self) -> Optional[str]:
        with self.session_factory() as db:
            return StorageRepository(db).get(TOKEN_KEY)

    @staticmethod
    def _session_from_response(response: LoginResponse) -> Session:
        user = response.user
        return Session(
            user_id=str(user.id),
            display_name=user.display_name,
            role=role_from_backend_roles([role.model_dump() for role in user.roles]),
            token=response.token,
            email=user.email,
            permissions=tuple(permission.slug for permission in user.permissions),
            roles=tuple(role.slug for role in user.roles),
        )

    def _persist(self, session: Session) -> None:
        with self.session_factory() as db:
            StorageRepository(db).put_many(
                {
                    TOKEN_KEY: session.token,
                    USER_KEY: {
                        "id": session.user_id,
                        "email": session.email,
                        "displayName": session.display_name,
                        "role": session.role.value,
                    },
                    PERMISSIONS_KEY: list(session.permissions),
                    ROLES_KEY: list(session.roles),
                }
            )
            db.commit()
