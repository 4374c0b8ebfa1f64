"""HTTP client for the site's admin and public API.

`ApiClient.request()` sends JSON over HTTP, attaches the session's bearer
token, tears the session down when that token is rejected (401) and maps
every failure onto the `core.errors` taxonomy. It never retries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from core.errors import (
    AuthenticationExpiredError,
    NetworkError,
    RequestFailedError,
)
from core.middleware import with_logging
from integrations.session import SessionState


logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {"Accept": "application/json"}


class ApiClient:
    """
    Async JSON client bound to one API root and one session.

    Example Usage:
        async with ApiClient("http://localhost:3001/api", session) as client:
            communities = await client.request("/public/communities", authenticated=False)
    """

    def __init__(
        self,
        base_url: str,
        session: SessionState,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root including the prefix (e.g. "https://host/api")
            session: Session providing and receiving the bearer token
            timeout: Request timeout in seconds; None keeps httpx's default
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session

        client_kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": _DEFAULT_HEADERS,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self.client = httpx.AsyncClient(**client_kwargs)
        logger.info(f"ApiClient initialized (base_url={self.base_url})")

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client connection."""
        await self.client.aclose()

    @with_logging
    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        """
        Make a request against the API.

        Args:
            endpoint: Path below the API root (e.g. "/communities/riverstone")
            method: HTTP method
            body: JSON-serializable request body
            params: Query parameters (None values are dropped)
            headers: Extra headers
            authenticated: Attach the bearer token when one is present

        Returns:
            Parsed JSON body, or None for an empty response

        Raises:
            AuthenticationExpiredError: Server rejected the bearer token with 401
                (session cleared)
            RequestFailedError: Server answered another non-2xx status, or 401
                to a request that carried no token
            NetworkError: No response was received
        """
        request_headers: Dict[str, str] = {}
        token_sent = False
        if authenticated:
            request_headers.update(self.session.auth_headers())
            token_sent = "Authorization" in request_headers
        if headers:
            request_headers.update(headers)

        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            response = await self.client.request(
                method,
                endpoint,
                json=body,
                params=query or None,
                headers=request_headers,
            )
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__) from e

        # A 401 without our token (e.g. bad login credentials) is an ordinary failure
        if response.status_code == 401 and token_sent:
            logger.warning(f"401 Unauthorized on {method} {endpoint} - logging out")
            await self.session.clear()
            raise AuthenticationExpiredError()

        if response.is_error:
            raise RequestFailedError(response.status_code, _error_message(response))

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise RequestFailedError(
                response.status_code,
                f"Invalid JSON in response: {e}"
            ) from e


def _error_message(response: httpx.Response) -> Optional[str]:
    """Server-provided error message, if the body is JSON with one."""
    try:
        payload = response.json()
    except ValueError:
        return None

    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if isinstance(message, str) and message:
            return message
    return None


__all__ = ["ApiClient"]
