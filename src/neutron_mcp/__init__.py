"""
Neutron MCP Server

An MCP server that lets AI agents move money through the Neutron payment
API: Lightning, on-chain BTC, USDT and fiat payouts, plus BTC-collateralized
USDt loans through the Neutron lending service.

Available tools:
- neutron_authenticate - Verify API credentials
- neutron_get_account / neutron_get_wallets / neutron_get_wallet - Account and balances
- neutron_create_lightning_invoice - Receive over Lightning in one call
- neutron_create_transaction / neutron_confirm_transaction - Quote and execute payments
- neutron_get_transaction / neutron_list_transactions - Track payments
- neutron_decode_invoice / neutron_resolve_lightning_address / neutron_resolve_lnurl
- neutron_get_btc_address / neutron_get_usdt_address - Deposit addresses
- neutron_*_webhook - Webhook management
- neutron_get_rate / neutron_get_fiat_institutions - Reference data
- neutron_lend_* - Collateralized loans
"""

__version__ = "1.3.0"

from .client import NeutronClient
from .config import NeutronSettings
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    LendingAPIError,
    NeutronAPIError,
    NeutronError,
    ToolArgumentError,
)
from .intents import LightningInvoiceIntent, TransactionIntent
from .lending_client import LendingClient
from .server import NeutronServer, main
from .session import Session, SessionManager
from .signer import compute_signature
from .transactions import LightningInvoice, TransactionController

__all__ = [
    # Server
    "NeutronServer",
    "main",
    # Clients
    "NeutronClient",
    "LendingClient",
    "Session",
    "SessionManager",
    "compute_signature",
    # Transactions
    "TransactionController",
    "TransactionIntent",
    "LightningInvoiceIntent",
    "LightningInvoice",
    # Configuration
    "NeutronSettings",
    # Errors
    "NeutronError",
    "ConfigurationError",
    "AuthenticationError",
    "NeutronAPIError",
    "LendingAPIError",
    "ToolArgumentError",
    # Version
    "__version__",
]
