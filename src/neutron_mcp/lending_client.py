"""
Lending Client

Plain JSON client for the Neutron lending service (BTC-collateralized USDt
loans with 2-of-3 multisig deposits). The service is an opaque peer: this
module only moves requests and maps errors.

Configuration: NEUTRON_LENDING_URL (default http://localhost:3001).
"""

import logging
from typing import Any

import httpx

from .config import NeutronSettings
from .exceptions import LendingAPIError
from .responses import decode_json, path_segment, pick_error_message

logger = logging.getLogger("neutron-mcp.lending")


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


class LendingClient:
    """Lending service client."""

    def __init__(
        self,
        settings: NeutronSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the lending client.

        Args:
            settings: Provides the lending service base URL and timeout
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = settings.lending_url
        self._http_client = httpx.AsyncClient(
            base_url=settings.lending_url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request to the lending service.

        Raises:
            LendingAPIError: On a non-2xx status or transport failure
        """
        try:
            response = await self._http_client.request(
                method=method,
                url=path,
                json=json_data,
                params=params,
            )
        except httpx.RequestError as e:
            raise LendingAPIError(0, f"Request failed: {e!s}") from e

        data = decode_json(response)

        if not response.is_success:
            message = pick_error_message(
                data, ("error",), f"Lending API error {response.status_code}"
            )
            logger.warning(f"Lending {method} {path} failed: {message}")
            raise LendingAPIError(response.status_code, message)

        return data

    # ===== Loans =====

    async def simulate(self, btc_amount: float, ltv_ratio: float) -> Any:
        return await self._request(
            "POST", "/api/loans/simulate", {"btcAmount": btc_amount, "ltvRatio": ltv_ratio}
        )

    async def quote(self, agent_id: str, btc_amount: float, ltv_ratio: float) -> Any:
        return await self._request(
            "POST",
            "/api/loans/quote",
            {"agentId": agent_id, "btcAmount": btc_amount, "ltvRatio": ltv_ratio},
        )

    async def create_loan(self, payload: dict[str, Any]) -> Any:
        return await self._request("POST", "/api/loans", _without_none(payload))

    async def get_loan(self, loan_id: str) -> Any:
        return await self._request("GET", f"/api/loans/{path_segment(loan_id)}")

    async def list_loans(self, agent_id: str) -> Any:
        return await self._request("GET", "/api/loans", params={"agent_id": agent_id})

    async def confirm_collateral(
        self, loan_id: str, btc_deposit_txid: str, confirmations: int
    ) -> Any:
        return await self._request(
            "POST",
            f"/api/loans/{path_segment(loan_id)}/confirm-collateral",
            {"btcDepositTxid": btc_deposit_txid, "confirmations": confirmations},
        )

    async def disburse(self, loan_id: str) -> Any:
        return await self._request("POST", f"/api/loans/{path_segment(loan_id)}/disburse")

    async def repay(
        self,
        loan_id: str,
        usdt_amount: float,
        eth_txid: str | None = None,
        from_address: str | None = None,
    ) -> Any:
        return await self._request(
            "POST",
            f"/api/loans/{path_segment(loan_id)}/repay",
            _without_none(
                {"usdtAmount": usdt_amount, "ethTxid": eth_txid, "fromAddress": from_address}
            ),
        )

    async def rollover(self, loan_id: str) -> Any:
        return await self._request("POST", f"/api/loans/{path_segment(loan_id)}/rollover")

    async def check_liquidation(self, loan_id: str) -> Any:
        return await self._request("POST", f"/api/loans/{path_segment(loan_id)}/liquidation-check")

    async def get_btc_price(self) -> Any:
        return await self._request("GET", "/api/loans/admin/price")

    # ===== DLC contracts =====

    async def create_dlc_contract(self, payload: dict[str, Any]) -> Any:
        return await self._request("POST", "/api/dlc/contracts", _without_none(payload))

    async def get_dlc_contract_by_loan(self, loan_id: str) -> Any:
        return await self._request("GET", f"/api/dlc/contracts/by-loan/{path_segment(loan_id)}")

    async def settle_dlc_contract(self, contract_id: str) -> Any:
        return await self._request("POST", f"/api/dlc/contracts/{path_segment(contract_id)}/settle")

    # ===== Notifications =====

    async def get_notifications(self, agent_id: str, unread_only: bool = False) -> Any:
        return await self._request(
            "GET",
            f"/api/notifications/agent/{path_segment(agent_id)}",
            params={"unread": "true"} if unread_only else None,
        )
