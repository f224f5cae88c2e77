"""
Request Dispatcher

Sends authenticated requests to the Neutron API and maps failures to
NeutronAPIError. The dispatcher does not interpret response shapes.
"""

import logging
from typing import Any, Mapping

import httpx

from .exceptions import NeutronAPIError
from .responses import decode_json, pick_error_message, status_text
from .session import SessionManager

logger = logging.getLogger("neutron-mcp.dispatcher")


class RequestDispatcher:
    """Issues bearer-authenticated JSON requests."""

    def __init__(self, http_client: httpx.AsyncClient, session_manager: SessionManager) -> None:
        """
        Initialize the dispatcher.

        Args:
            http_client: Client whose base_url points at the Neutron API
            session_manager: Provides the cached access token
        """
        self._http = http_client
        self._sessions = session_manager

    async def request(
        self,
        method: str,
        path: str,
        json_data: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path (without base URL)
            json_data: Request body; None sends no body
            params: Query parameters; None values are dropped

        Returns:
            Parsed JSON body ({} for an empty body)

        Raises:
            AuthenticationError: If a new session cannot be obtained
            NeutronAPIError: On a non-2xx status or transport failure
        """
        session = await self._sessions.ensure_authenticated()

        headers = {"Authorization": f"Bearer {session.access_token}"}
        if json_data is not None:
            headers["Content-Type"] = "application/json"

        query = {k: _query_value(v) for k, v in (params or {}).items() if v is not None}

        try:
            response = await self._http.request(
                method=method,
                url=path,
                headers=headers,
                json=json_data,
                params=query or None,
            )
        except httpx.RequestError as e:
            raise NeutronAPIError(0, f"Request failed: {e!s}") from e

        body = decode_json(response)

        if not response.is_success:
            message = pick_error_message(body, ("error", "message"), status_text(response))
            logger.warning(f"{method} {path} failed: {response.status_code} - {message}")
            raise NeutronAPIError(response.status_code, message, body)

        logger.debug(f"{method} {path} -> {response.status_code}")
        return body


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
