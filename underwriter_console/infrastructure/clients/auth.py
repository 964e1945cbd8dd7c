"""Auth API client"""

from underwriter_console.infrastructure.clients.base import ResourceClient
from underwriter_console.infrastructure.clients.schemas import LoginResponse


class AuthClient(ResourceClient):
    """
    Client for the login endpoint.

    Built without an unauthorized hook: a 401 here means bad credentials,
    not an expired session.
    """

    service_name = "auth"

    async def login(self, email: str, password: str) -> LoginResponse:
        payload = await self.request("POST", "/login", json={"email": email, "password": password})
        return LoginResponse.model_validate(payload or {})
