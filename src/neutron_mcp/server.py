"""
Neutron MCP Server

Main server module exposing the Neutron payment API and the lending service
to AI agents via MCP.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    CallToolResult,
    TextContent,
    Tool,
)

from . import __version__
from .client import NeutronClient
from .config import NeutronSettings
from .exceptions import ConfigurationError, NeutronError, ToolArgumentError
from .intents import (
    LightningInvoiceIntent,
    TransactionIntent,
    optional_bool,
    optional_number,
    optional_str,
    require_number,
    require_str,
)
from .lending_client import LendingClient
from .tool_definitions import TOOLS
from .tools import account, lending, lightning, receive, reference, transactions, webhooks
from .transactions import TransactionController

# Configure logging (stderr; stdout carries the MCP protocol)
logging.basicConfig(
    level=os.getenv("NEUTRON_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("neutron-mcp")


class NeutronServer:
    """MCP Server for the Neutron payment API."""

    def __init__(
        self,
        settings: NeutronSettings,
        transport: httpx.AsyncBaseTransport | None = None,
        lending_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the server and its shared clients.

        Args:
            settings: Credentials and endpoints
            transport: Optional httpx transport for the Neutron API
            lending_transport: Optional httpx transport for the lending service
        """
        self.server = Server("neutron-mcp")
        self.settings = settings
        self.client = NeutronClient(settings, transport=transport)
        self.transactions = TransactionController(self.client)
        self.lending = LendingClient(settings, transport=lending_transport)

        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return the list of available tools."""
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool invocations."""
            result = await self.call_tool(name, arguments)
            if result.isError:
                # Raised errors are reported by the SDK as isError results
                raise NeutronError(result.content[0].text)
            return result.content

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """
        Run one tool and wrap the outcome for MCP.

        Returns:
            Pretty-printed JSON on success, or isError=True with
            "Error: {message}" when anything raised
        """
        try:
            result = await self.execute_tool(name, arguments or {})
            text = json.dumps(result, indent=2)
            return CallToolResult(content=[TextContent(type="text", text=text)])
        except Exception as e:
            logger.exception(f"Error in tool {name}")
            return CallToolResult(
                content=[TextContent(type="text", text=f"Error: {e!s}")],
                isError=True,
            )

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Route a tool call to its handler."""
        # Account
        if name == "neutron_authenticate":
            return await account.authenticate(client=self.client)

        elif name == "neutron_get_account":
            return await account.get_account(client=self.client)

        elif name == "neutron_get_wallets":
            return await account.get_wallets(client=self.client)

        elif name == "neutron_get_wallet":
            return await account.get_wallet(
                wallet_id=require_str(arguments, "walletId"),
                client=self.client,
            )

        # Transactions
        elif name == "neutron_create_lightning_invoice":
            return await transactions.create_lightning_invoice(
                intent=LightningInvoiceIntent.from_arguments(arguments),
                controller=self.transactions,
            )

        elif name == "neutron_create_transaction":
            return await transactions.create_transaction(
                intent=TransactionIntent.from_arguments(arguments),
                controller=self.transactions,
            )

        elif name == "neutron_confirm_transaction":
            return await transactions.confirm_transaction(
                transaction_id=require_str(arguments, "transactionId"),
                controller=self.transactions,
            )

        elif name == "neutron_get_transaction":
            return await transactions.get_transaction(
                transaction_id=require_str(arguments, "transactionId"),
                client=self.client,
            )

        elif name == "neutron_list_transactions":
            return await transactions.list_transactions(arguments, client=self.client)

        # Lightning utilities
        elif name == "neutron_decode_invoice":
            return await lightning.decode_invoice(
                invoice=require_str(arguments, "invoice"),
                client=self.client,
            )

        elif name == "neutron_resolve_lightning_address":
            amount_msat = optional_number(arguments, "amountMsat")
            return await lightning.resolve_lightning_address(
                address=require_str(arguments, "address"),
                client=self.client,
                amount_msat=int(amount_msat) if amount_msat is not None else None,
            )

        elif name == "neutron_resolve_lnurl":
            return await lightning.resolve_lnurl(
                lnurl=require_str(arguments, "lnurl"),
                client=self.client,
            )

        # Receive addresses
        elif name == "neutron_get_btc_address":
            return await receive.get_btc_address(client=self.client)

        elif name == "neutron_get_usdt_address":
            return await receive.get_usdt_address(
                client=self.client,
                chain=optional_str(arguments, "chain"),
            )

        # Webhooks
        elif name == "neutron_create_webhook":
            return await webhooks.create_webhook(
                callback=require_str(arguments, "callback"),
                secret=require_str(arguments, "secret"),
                client=self.client,
            )

        elif name == "neutron_list_webhooks":
            return await webhooks.list_webhooks(client=self.client)

        elif name == "neutron_update_webhook":
            return await webhooks.update_webhook(
                webhook_id=require_str(arguments, "webhookId"),
                client=self.client,
                callback=optional_str(arguments, "callback"),
                secret=optional_str(arguments, "secret"),
            )

        elif name == "neutron_delete_webhook":
            return await webhooks.delete_webhook(
                webhook_id=require_str(arguments, "webhookId"),
                client=self.client,
            )

        # Reference data
        elif name == "neutron_get_rate":
            return await reference.get_rate(client=self.client)

        elif name == "neutron_get_fiat_institutions":
            return await reference.get_fiat_institutions(
                country_code=require_str(arguments, "countryCode"),
                client=self.client,
            )

        # Lending
        elif name == "neutron_lend_simulate":
            return await lending.simulate_loan(
                btc_amount=require_number(arguments, "btcAmount"),
                ltv_ratio=require_number(arguments, "ltvRatio"),
                lending=self.lending,
            )

        elif name == "neutron_lend_quote":
            return await lending.quote_loan(
                agent_id=require_str(arguments, "agentId"),
                btc_amount=require_number(arguments, "btcAmount"),
                ltv_ratio=require_number(arguments, "ltvRatio"),
                lending=self.lending,
            )

        elif name == "neutron_lend_create":
            return await lending.create_loan(
                agent_id=require_str(arguments, "agentId"),
                btc_amount=require_number(arguments, "btcAmount"),
                ltv_ratio=require_number(arguments, "ltvRatio"),
                return_address=require_str(arguments, "returnAddress"),
                usdt_receive_address=require_str(arguments, "usdtReceiveAddress"),
                lending=self.lending,
                quote_id=optional_str(arguments, "quoteId"),
                borrower_pubkey=optional_str(arguments, "borrowerPubkey"),
            )

        elif name == "neutron_lend_confirm_collateral":
            return await lending.confirm_collateral(
                loan_id=require_str(arguments, "loanId"),
                btc_deposit_txid=require_str(arguments, "btcDepositTxid"),
                confirmations=int(require_number(arguments, "confirmations")),
                lending=self.lending,
            )

        elif name == "neutron_lend_disburse":
            return await lending.disburse_loan(
                loan_id=require_str(arguments, "loanId"),
                lending=self.lending,
            )

        elif name == "neutron_lend_status":
            return await lending.get_loan_status(
                loan_id=require_str(arguments, "loanId"),
                lending=self.lending,
            )

        elif name == "neutron_lend_repay":
            return await lending.repay_loan(
                loan_id=require_str(arguments, "loanId"),
                usdt_amount=require_number(arguments, "usdtAmount"),
                lending=self.lending,
                eth_txid=optional_str(arguments, "ethTxid"),
                from_address=optional_str(arguments, "fromAddress"),
            )

        elif name == "neutron_lend_list":
            return await lending.list_loans(
                agent_id=require_str(arguments, "agentId"),
                lending=self.lending,
            )

        elif name == "neutron_lend_rollover":
            return await lending.rollover_loan(
                loan_id=require_str(arguments, "loanId"),
                accept_terms=optional_bool(arguments, "acceptTerms"),
                lending=self.lending,
            )

        elif name == "neutron_lend_check_liquidation":
            return await lending.check_liquidation(
                loan_id=require_str(arguments, "loanId"),
                lending=self.lending,
            )

        elif name == "neutron_lend_btc_price":
            return await lending.get_btc_price(lending=self.lending)

        elif name == "neutron_lend_settle":
            return await lending.settle_loan(
                loan_id=require_str(arguments, "loanId"),
                lending=self.lending,
            )

        elif name == "neutron_lend_notifications":
            return await lending.get_notifications(
                agent_id=require_str(arguments, "agentId"),
                lending=self.lending,
                unread_only=optional_bool(arguments, "unreadOnly"),
            )

        raise ToolArgumentError(f"Unknown tool: {name}")

    async def close(self) -> None:
        """Close the HTTP clients."""
        await self.client.close()
        await self.lending.close()

    async def run(self) -> None:
        """Run the MCP server."""
        logger.info(f"Starting Neutron MCP server v{__version__} on stdio...")

        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the MCP server."""
    try:
        settings = NeutronSettings.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    server = NeutronServer(settings)

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
