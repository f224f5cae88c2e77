"""
MCP tool catalog: names, descriptions and input schemas advertised to the
agent by list_tools.
"""

from mcp.types import Tool

_NO_ARGS = {"type": "object", "properties": {}, "required": []}

_LTV_RATIO = {
    "type": "number",
    "enum": [0.5, 0.6],
    "description": "Loan-to-value ratio: 0.5 (50%, safer) or 0.6 (60%, more USDt but higher liquidation risk)",
}


def _loan_id(description: str = "Loan ID") -> dict:
    return {
        "type": "object",
        "properties": {"loanId": {"type": "string", "description": description}},
        "required": ["loanId"],
    }


ACCOUNT_TOOLS = [
    Tool(
        name="neutron_authenticate",
        description=(
            "Verify your Neutron API credentials. "
            "Returns your account ID and confirms access is working."
        ),
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_get_account",
        description="Get account details: display name, status, country, timezone, and sub-accounts.",
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_get_wallets",
        description=(
            "List all wallets with balances. "
            "Shows each currency (BTC, USDT, fiat) with total and available balance."
        ),
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_get_wallet",
        description="Get a specific wallet by ID. Shows balance, available balance, and currency.",
        inputSchema={
            "type": "object",
            "properties": {
                "walletId": {"type": "string", "description": "Wallet ID (e.g. wal_btc_001)"},
            },
            "required": ["walletId"],
        },
    ),
]

TRANSACTION_TOOLS = [
    Tool(
        name="neutron_create_lightning_invoice",
        description=(
            "Create a Lightning invoice to receive Bitcoin. "
            "Returns a BOLT11 payment request and QR code page.\n\n"
            "Examples:\n"
            "- Receive 10,000 sats: amountSats=10000\n"
            "- Receive 0.001 BTC: amountBtc=0.001\n"
            '- With tracking: amountSats=5000, extRefId="order-123"'
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "amountSats": {
                    "type": "number",
                    "description": "Amount in satoshis (e.g. 10000 = 10,000 sats). Use this OR amountBtc.",
                },
                "amountBtc": {
                    "type": "number",
                    "description": "Amount in BTC (e.g. 0.0001). Use this OR amountSats.",
                },
                "memo": {"type": "string", "description": "Invoice description shown to the payer"},
                "extRefId": {
                    "type": "string",
                    "description": "Your reference ID for tracking (e.g. order ID)",
                },
            },
            "required": [],
        },
    ),
    Tool(
        name="neutron_create_transaction",
        description=(
            "Create a transaction. Supports all payment types:\n\n"
            'Lightning send: sourceCcy="BTC", sourceMethod="neutronpay", destCcy="BTC", '
            'destMethod="lightning", paymentRequest="lnbc..."\n'
            'Lightning Address: sourceCcy="BTC", sourceMethod="neutronpay", destCcy="BTC", '
            'destMethod="lnurl", lnurl="user@wallet.com", sourceAmount=0.0001\n'
            'On-chain send: sourceCcy="BTC", sourceMethod="neutronpay", destCcy="BTC", '
            'destMethod="on-chain", address="bc1q..."\n'
            'On-chain receive: sourceCcy="BTC", sourceMethod="on-chain", destCcy="BTC", '
            'destMethod="neutronpay", destAmount=0.001\n'
            'USDT send (TRON): sourceCcy="USDT", sourceMethod="neutronpay", destCcy="USDT", '
            'destMethod="tron", address="T..."\n'
            'Internal swap: sourceCcy="BTC", sourceMethod="neutronpay", destCcy="USDT", '
            'destMethod="neutronpay", sourceAmount=0.001\n'
            'Fiat payout: sourceCcy="BTC", sourceMethod="neutronpay", destCcy="VND", '
            'destMethod="vnd-instant", bankAcctNum="...", institutionCode="...", '
            'recipientName="...", countryCode="VN"\n\n'
            "Amounts are in BTC (not sats). 100 sats = 0.00000100 BTC.\n"
            "Set amount on ONE side only (source OR dest), not both.\n"
            "Returns a quoted transaction; call neutron_confirm_transaction to execute."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "sourceCcy": {
                    "type": "string",
                    "description": "Source currency: BTC, USDT, VND, USD, CAD, etc.",
                },
                "sourceMethod": {
                    "type": "string",
                    "description": (
                        "Source method: neutronpay (from wallet), lightning (receive LN), "
                        "on-chain (receive BTC)"
                    ),
                },
                "sourceAmount": {
                    "type": "number",
                    "description": "Amount from source (in BTC for Bitcoin). Set on source OR dest, not both.",
                },
                "destCcy": {
                    "type": "string",
                    "description": "Destination currency: BTC, USDT, VND, USD, CAD, etc.",
                },
                "destMethod": {
                    "type": "string",
                    "description": (
                        "Dest method: neutronpay (to wallet), lightning (pay invoice), "
                        "lnurl (pay LN address), on-chain, tron, eth, vnd-instant, etc."
                    ),
                },
                "destAmount": {
                    "type": "number",
                    "description": "Amount to destination. Set on source OR dest, not both.",
                },
                "paymentRequest": {
                    "type": "string",
                    "description": "BOLT11 Lightning invoice to pay (for destMethod=lightning)",
                },
                "lnurl": {
                    "type": "string",
                    "description": "Lightning Address (user@domain.com) or LNURL string (for destMethod=lnurl)",
                },
                "address": {
                    "type": "string",
                    "description": "Crypto address: Bitcoin (bc1q...), TRON (T...), Ethereum (0x...)",
                },
                "bankAcctNum": {
                    "type": "string",
                    "description": "Bank account number (for fiat payouts)",
                },
                "institutionCode": {
                    "type": "string",
                    "description": "Bank code from neutron_get_fiat_institutions (for fiat payouts)",
                },
                "recipientName": {
                    "type": "string",
                    "description": "Recipient legal full name (required for fiat payouts)",
                },
                "countryCode": {
                    "type": "string",
                    "description": "Recipient country code e.g. VN, NG, KE (required for fiat payouts)",
                },
                "kycType": {
                    "type": "string",
                    "enum": ["individual", "business"],
                    "description": "Recipient type (for fiat payouts, default: individual)",
                },
                "extRefId": {"type": "string", "description": "Your reference ID for tracking"},
            },
            "required": ["sourceCcy", "sourceMethod", "destCcy", "destMethod"],
        },
    ),
    Tool(
        name="neutron_confirm_transaction",
        description=(
            "Confirm a quoted transaction to execute it. "
            "Call this after neutron_create_transaction."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "transactionId": {
                    "type": "string",
                    "description": "Transaction ID (txnId) to confirm",
                },
            },
            "required": ["transactionId"],
        },
    ),
    Tool(
        name="neutron_get_transaction",
        description=(
            "Check transaction status and details. "
            "Use to track payment progress after confirmation."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "transactionId": {"type": "string", "description": "Transaction ID (txnId)"},
            },
            "required": ["transactionId"],
        },
    ),
    Tool(
        name="neutron_list_transactions",
        description="List transactions with optional filters. Returns recent transactions by default.",
        inputSchema={
            "type": "object",
            "properties": {
                "status": {
                    "type": "string",
                    "description": "Filter by state: quoted, completed, failed, expired, etc.",
                },
                "method": {
                    "type": "string",
                    "description": "Filter by method: lightning, on-chain, tron, etc.",
                },
                "currency": {
                    "type": "string",
                    "description": "Filter by currency: BTC, USDT, VND, etc.",
                },
                "fromDate": {"type": "string", "description": "Start date (ISO 8601)"},
                "toDate": {"type": "string", "description": "End date (ISO 8601)"},
                "limit": {"type": "number", "description": "Max results (default 20)"},
                "offset": {"type": "number", "description": "Offset for pagination"},
            },
            "required": [],
        },
    ),
]

LIGHTNING_TOOLS = [
    Tool(
        name="neutron_decode_invoice",
        description=(
            "Decode a BOLT11 Lightning invoice to inspect amount, expiry, destination, "
            "and payment status before paying."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "invoice": {
                    "type": "string",
                    "description": "BOLT11 invoice string (starts with lnbc...)",
                },
            },
            "required": ["invoice"],
        },
    ),
    Tool(
        name="neutron_resolve_lightning_address",
        description=(
            "Look up a Lightning Address (user@domain.com) to verify it exists "
            "and check its parameters (min/max amounts)."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "address": {
                    "type": "string",
                    "description": "Lightning Address (e.g. alice@getalby.com)",
                },
                "amountMsat": {
                    "type": "number",
                    "description": "Optional: amount in millisatoshis to get a specific invoice",
                },
            },
            "required": ["address"],
        },
    ),
    Tool(
        name="neutron_resolve_lnurl",
        description="Resolve an LNURL string to see its type (pay/withdraw/channel) and parameters.",
        inputSchema={
            "type": "object",
            "properties": {
                "lnurl": {"type": "string", "description": "LNURL string (starts with lnurl1...)"},
            },
            "required": ["lnurl"],
        },
    ),
]

RECEIVE_TOOLS = [
    Tool(
        name="neutron_get_btc_address",
        description=(
            "Get your Bitcoin on-chain deposit address. "
            "Static, reusable SegWit (bc1q...) address."
        ),
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_get_usdt_address",
        description="Get your USDT deposit address on TRON (TRC-20) or Ethereum (ERC-20).",
        inputSchema={
            "type": "object",
            "properties": {
                "chain": {
                    "type": "string",
                    "enum": ["TRON", "ETH"],
                    "description": "Blockchain: TRON (recommended, faster & cheaper) or ETH. Default: TRON",
                },
            },
            "required": [],
        },
    ),
]

WEBHOOK_TOOLS = [
    Tool(
        name="neutron_create_webhook",
        description=(
            "Register a webhook to receive transaction state change notifications. "
            "Requires an HTTPS callback URL."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "callback": {"type": "string", "description": "Your HTTPS webhook endpoint URL"},
                "secret": {
                    "type": "string",
                    "description": "Secret for verifying webhook signatures (X-Neutronpay-Signature header)",
                },
            },
            "required": ["callback", "secret"],
        },
    ),
    Tool(
        name="neutron_list_webhooks",
        description="List all registered webhooks.",
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_update_webhook",
        description="Update a webhook's callback URL or secret.",
        inputSchema={
            "type": "object",
            "properties": {
                "webhookId": {"type": "string", "description": "Webhook ID to update"},
                "callback": {"type": "string", "description": "New callback URL"},
                "secret": {"type": "string", "description": "New webhook secret"},
            },
            "required": ["webhookId"],
        },
    ),
    Tool(
        name="neutron_delete_webhook",
        description="Delete a webhook.",
        inputSchema={
            "type": "object",
            "properties": {
                "webhookId": {"type": "string", "description": "Webhook ID to delete"},
            },
            "required": ["webhookId"],
        },
    ),
]

REFERENCE_TOOLS = [
    Tool(
        name="neutron_get_rate",
        description="Get current BTC exchange rates against all supported currencies (USD, VND, USDT, etc.).",
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_get_fiat_institutions",
        description=(
            "List banks and financial institutions for a country. "
            "Returns institution codes needed for fiat payouts."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "countryCode": {
                    "type": "string",
                    "description": "ISO country code (e.g. VN, NG, KE, GH)",
                },
            },
            "required": ["countryCode"],
        },
    ),
]

LENDING_TOOLS = [
    Tool(
        name="neutron_lend_simulate",
        description=(
            "Preview a collateralized loan. Deposit BTC as collateral, receive USDt. "
            "Shows loan amount, interest (8% APR), total payback, and liquidation price."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "btcAmount": {
                    "type": "number",
                    "description": "BTC amount to use as collateral (e.g. 1.0)",
                },
                "ltvRatio": _LTV_RATIO,
            },
            "required": ["btcAmount", "ltvRatio"],
        },
    ),
    Tool(
        name="neutron_lend_quote",
        description=(
            "Lock a BTC price for 6 minutes. Use this before creating a loan to guarantee "
            "the price. Returns a quoteId to pass to neutron_lend_create."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string", "description": "Your agent identifier"},
                "btcAmount": {"type": "number", "description": "BTC collateral amount"},
                "ltvRatio": _LTV_RATIO,
            },
            "required": ["agentId", "btcAmount", "ltvRatio"],
        },
    ),
    Tool(
        name="neutron_lend_create",
        description=(
            "Create a collateralized loan with 2-of-3 multisig. Flow: quote (optional), "
            "create, send BTC to depositAddress, confirm collateral, USDt disbursed. "
            "If borrowerPubkey is provided, a P2WSH multisig deposit address is generated. "
            "Returns depositAddress, dlcContractId, and multisig keys."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string", "description": "Your agent identifier"},
                "btcAmount": {"type": "number", "description": "BTC collateral amount"},
                "ltvRatio": _LTV_RATIO,
                "returnAddress": {
                    "type": "string",
                    "description": (
                        "BTC address to return collateral after full repayment "
                        "(bc1q... or tb1q... for testnet)"
                    ),
                },
                "usdtReceiveAddress": {
                    "type": "string",
                    "description": "Your Ethereum/Base address to receive the USDt loan (0x...)",
                },
                "quoteId": {
                    "type": "string",
                    "description": "Optional quoteId from neutron_lend_quote to lock the price",
                },
                "borrowerPubkey": {
                    "type": "string",
                    "description": (
                        "Optional compressed BTC public key (hex, 66 chars) for 2-of-3 multisig. "
                        "If omitted, a simulated deposit address is used."
                    ),
                },
            },
            "required": ["agentId", "btcAmount", "ltvRatio", "returnAddress", "usdtReceiveAddress"],
        },
    ),
    Tool(
        name="neutron_lend_confirm_collateral",
        description=(
            "Confirm BTC collateral deposit. Call after sending BTC to the multisig address. "
            "Requires 3+ on-chain confirmations. After confirmation, USDt can be disbursed."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "loanId": {"type": "string", "description": "Loan ID"},
                "btcDepositTxid": {"type": "string", "description": "BTC deposit transaction ID"},
                "confirmations": {
                    "type": "number",
                    "description": "Number of on-chain confirmations (minimum 3)",
                },
            },
            "required": ["loanId", "btcDepositTxid", "confirmations"],
        },
    ),
    Tool(
        name="neutron_lend_disburse",
        description=(
            "Disburse the USDt loan to the agent's Ethereum address. Only works after BTC "
            "collateral is confirmed. Returns the Etherscan transaction link."
        ),
        inputSchema=_loan_id(),
    ),
    Tool(
        name="neutron_lend_status",
        description=(
            "Get loan details: collateral, loan amount, total owed, repaid amount, "
            "liquidation price, status, repayment history, and multisig verification links."
        ),
        inputSchema=_loan_id(),
    ),
    Tool(
        name="neutron_lend_repay",
        description=(
            "Make a USDt (ERC-20) repayment on a loan. Send USDt to the loan's repayment "
            "address, then call this with the Ethereum transaction ID. Can be partial or full."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "loanId": {"type": "string", "description": "Loan ID"},
                "usdtAmount": {"type": "number", "description": "USDt amount repaid"},
                "ethTxid": {
                    "type": "string",
                    "description": "Ethereum transaction hash of the USDt payment (0x...)",
                },
                "fromAddress": {
                    "type": "string",
                    "description": "Ethereum address the USDt was sent from (0x...)",
                },
            },
            "required": ["loanId", "usdtAmount"],
        },
    ),
    Tool(
        name="neutron_lend_list",
        description=(
            "List all loans for an agent. "
            "Shows active, repaid, liquidated, and defaulted loans."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string", "description": "Agent ID to list loans for"},
            },
            "required": ["agentId"],
        },
    ),
    Tool(
        name="neutron_lend_rollover",
        description=(
            "Extend a loan by 1 year. Adds a $500 flat fee and raises the interest rate by 1% "
            "(e.g. 8% to 9%). IMPORTANT: before calling this, present the terms to the user "
            "and get explicit acceptance. Set acceptTerms=true only after the user confirms."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "loanId": {"type": "string", "description": "Loan ID to rollover"},
                "acceptTerms": {
                    "type": "boolean",
                    "description": (
                        "Must be true; confirms the user accepted the rollover terms "
                        "($500 fee, +1% interest, 1yr extension)"
                    ),
                },
            },
            "required": ["loanId", "acceptTerms"],
        },
    ),
    Tool(
        name="neutron_lend_check_liquidation",
        description=(
            "Check if a loan should be liquidated based on the current BTC price. "
            "If the price is below the liquidation threshold, collateral is seized."
        ),
        inputSchema=_loan_id(),
    ),
    Tool(
        name="neutron_lend_btc_price",
        description="Get the current BTC price used by the lending engine.",
        inputSchema=_NO_ARGS,
    ),
    Tool(
        name="neutron_lend_settle",
        description=(
            "Settle a fully-repaid loan by releasing BTC collateral from the 2-of-3 multisig "
            "back to the borrower's return address. Only works when loan status is 'repaid'. "
            "Returns the settlement txid with an explorer link."
        ),
        inputSchema=_loan_id("Loan ID to settle"),
    ),
    Tool(
        name="neutron_lend_notifications",
        description=(
            "Get notifications for an agent: expiry warnings, payment confirmations, "
            "liquidation alerts, and rollover confirmations."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "agentId": {"type": "string", "description": "Agent ID"},
                "unreadOnly": {
                    "type": "boolean",
                    "description": "Only return unread notifications (default: false)",
                },
            },
            "required": ["agentId"],
        },
    ),
]

TOOLS: list[Tool] = [
    *ACCOUNT_TOOLS,
    *TRANSACTION_TOOLS,
    *LIGHTNING_TOOLS,
    *RECEIVE_TOOLS,
    *WEBHOOK_TOOLS,
    *REFERENCE_TOOLS,
    *LENDING_TOOLS,
]
