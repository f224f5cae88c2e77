"""
Neutron API Client

One method per Neutron REST endpoint used by the MCP tools. Authentication
and error mapping are delegated to SessionManager and RequestDispatcher,
which share a single httpx.AsyncClient.

Configuration: see NeutronSettings.from_env().
API docs: https://docs.neutron.me/
"""

import logging
from typing import Any

import httpx

from .config import NeutronSettings
from .dispatcher import RequestDispatcher
from .responses import path_segment
from .session import Session, SessionManager

logger = logging.getLogger("neutron-mcp.client")

USER_AGENT = "neutron-mcp-server/1.3.0"


class NeutronClient:
    """
    Neutron API client.

    A single instance is shared by every tool call of the server process, so
    the access token obtained by the first call is reused until it expires.
    """

    def __init__(
        self,
        settings: NeutronSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Credentials and API base URL
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.settings = settings
        self._http_client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=settings.http_timeout,
            transport=transport,
        )
        self.sessions = SessionManager(self._http_client, settings)
        self.dispatcher = RequestDispatcher(self._http_client, self.sessions)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self) -> "NeutronClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.dispatcher.request(method, path, json_data=json_data, params=params)

    # ===== Authentication =====

    async def authenticate(self) -> Session:
        """Verify credentials by forcing a fresh token handshake."""
        return await self.sessions.force_reauthenticate()

    def get_account_id(self) -> str | None:
        """Account ID of the cached session, if any."""
        return self.sessions.account_id

    # ===== Account =====

    async def get_account(self) -> Any:
        session = await self.sessions.ensure_authenticated()
        return await self._request("GET", f"/api/v2/account/{path_segment(session.account_id)}")

    async def get_wallets(self) -> Any:
        session = await self.sessions.ensure_authenticated()
        return await self._request(
            "GET", f"/api/v2/account/{path_segment(session.account_id)}/wallet/"
        )

    async def get_wallet(self, wallet_id: str) -> Any:
        session = await self.sessions.ensure_authenticated()
        return await self._request(
            "GET",
            f"/api/v2/account/{path_segment(session.account_id)}/wallet/{path_segment(wallet_id)}",
        )

    # ===== Transactions =====

    async def create_transaction(self, body: dict[str, Any]) -> Any:
        """Create (quote) a transaction from a canonical request body."""
        return await self._request("POST", "/api/v2/transaction", json_data=body)

    async def confirm_transaction(self, transaction_id: str) -> Any:
        """Execute a quoted transaction."""
        return await self._request(
            "PUT", f"/api/v2/transaction/{path_segment(transaction_id)}/confirm"
        )

    async def get_transaction(self, transaction_id: str) -> Any:
        return await self._request("GET", f"/api/v2/transaction/{path_segment(transaction_id)}")

    async def list_transactions(self, **filters: Any) -> Any:
        """
        List transactions.

        Args:
            **filters: status, method, currency, fromDate, toDate, limit, offset.
                None values are not sent.
        """
        return await self._request("GET", "/api/v2/transaction", params=filters)

    # ===== Lightning utilities =====

    async def decode_invoice(self, invoice: str) -> Any:
        return await self._request(
            "GET", "/api/v2/lightning/invoice", params={"invoice": invoice}
        )

    async def resolve_lightning_address(
        self, address: str, amount_msat: int | None = None
    ) -> Any:
        return await self._request(
            "GET",
            "/api/v2/lightning/resolve-ln-address",
            params={"lnAddress": address, "amount": amount_msat},
        )

    async def resolve_lnurl(self, lnurl: str) -> Any:
        return await self._request(
            "GET", "/api/v2/lightning/resolve-lnurl", params={"lnurl": lnurl}
        )

    # ===== Receive addresses =====

    async def get_btc_receive_address(self) -> Any:
        return await self._request("GET", "/api/v2/account/onchain-address")

    async def get_usdt_receive_address(self, chain_id: str = "TRON") -> Any:
        return await self._request(
            "GET",
            "/api/v2/account/stablecoin-onchain-address",
            params={"walletCcy": "USDT", "chainId": chain_id},
        )

    # ===== Webhooks =====

    async def create_webhook(self, callback: str, secret: str) -> Any:
        return await self._request(
            "POST", "/api/v2/webhook", json_data={"callback": callback, "secret": secret}
        )

    async def list_webhooks(self) -> Any:
        return await self._request("GET", "/api/v2/webhook")

    async def update_webhook(self, webhook_id: str, body: dict[str, Any]) -> Any:
        return await self._request(
            "PUT", f"/api/v2/webhook/{path_segment(webhook_id)}", json_data=body
        )

    async def delete_webhook(self, webhook_id: str) -> None:
        await self._request("DELETE", f"/api/v2/webhook/{path_segment(webhook_id)}")

    # ===== Reference data =====

    async def get_rate(self) -> Any:
        return await self._request("GET", "/api/v2/rate")

    async def get_fiat_institutions(self, country_code: str) -> Any:
        return await self._request(
            "GET",
            f"/api/v2/reference/fiat-institution/by-country/{path_segment(country_code)}",
        )
