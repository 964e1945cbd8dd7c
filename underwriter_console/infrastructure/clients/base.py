"""Shared HTTP plumbing for the backend service clients.

Every backend call goes through ``ResourceClient.request`` so that there is
exactly one place where the bearer token is attached, where transport and
status errors are turned into the console's error taxonomy, and where a
401/403 tears the session down.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import httpx

from underwriter_console.config import settings
from underwriter_console.domain.exceptions import (
    NetworkError,
    NotFound,
    RequestTimeout,
    ServerError,
    Unauthorized,
)
from underwriter_console.infrastructure.observability.logging import log_forced_logout
from underwriter_console.infrastructure.observability.metrics import (
    backend_latency_histogram,
    backend_request_counter,
    forced_logout_counter,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]
UnauthorizedHook = Callable[[], None]


def path_segment(value: str) -> str:
    """Escape a record ID for use as one URL path segment"""
    return quote(str(value), safe="")


def server_message(response: httpx.Response) -> Optional[str]:
    """Human-readable message from an error body, if the backend sent one"""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class ResourceClient:
    """Client for one backend REST service"""

    service_name = "backend"

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        on_unauthorized: Optional[UnauthorizedHook] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one call and return the decoded JSON body.

        Raises:
            Unauthorized: 401/403, after the unauthorized hook has run
            NotFound: 404
            ServerError: any other non-2xx, or an undecodable body
            RequestTimeout: no response within the timeout
            NetworkError: connection-level failure
        """
        start = time.perf_counter()
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
            except httpx.TimeoutException as e:
                self._record("timeout", start)
                logger.warning(
                    f"{self.service_name} timeout after {self.timeout}s",
                    extra={"backend_service": self.service_name, "path": path},
                )
                raise RequestTimeout() from e
            except httpx.RequestError as e:
                self._record("network_error", start)
                logger.warning(
                    f"{self.service_name} unreachable: {e}",
                    extra={"backend_service": self.service_name, "path": path},
                )
                raise NetworkError() from e

        return self._handle(method, path, response, start)

    def _handle(self, method: str, path: str, response: httpx.Response, start: float) -> Any:
        status = response.status_code
        extra = {
            "backend_service": self.service_name,
            "method": method,
            "path": path,
            "status_code": status,
            "duration_ms": (time.perf_counter() - start) * 1000,
        }

        if status in (401, 403):
            self._record("unauthorized", start)
            logger.info("Backend refused credentials", extra=extra)
            if self.on_unauthorized is not None:
                forced_logout_counter.inc()
                log_forced_logout(self.service_name, status)
                self.on_unauthorized()
            raise Unauthorized(server_message(response), status_code=status)

        if status == 404:
            self._record("not_found", start)
            logger.info("Backend resource not found", extra=extra)
            raise NotFound(server_message(response), status_code=status)

        if not response.is_success:
            self._record("server_error", start)
            logger.error("Backend call failed", extra=extra)
            message = server_message(response) or f"Request failed with status {status}"
            raise ServerError(message, status_code=status)

        self._record("ok", start)
        logger.debug("Backend call completed", extra=extra)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServerError(f"Invalid response from {self.service_name}", status_code=status) from e

    def _record(self, outcome: str, start: float) -> None:
        backend_request_counter.labels(service=self.service_name, outcome=outcome).inc()
        backend_latency_histogram.labels(service=self.service_name).observe(time.perf_counter() - start)
