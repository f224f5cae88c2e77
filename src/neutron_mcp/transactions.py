"""
Transaction Lifecycle Controller

Neutron transactions are two-phase: creation returns a quoted transaction,
and a separate confirm call executes it. Receiving over Lightning has nothing
to quote against, so create_lightning_invoice() runs both phases in one call.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .client import NeutronClient
from .exceptions import NeutronAPIError
from .intents import LightningInvoiceIntent, TransactionIntent
from .models import LegRequest, TransactionRequest, btc_to_sats
from .normalizer import build_transaction_request

logger = logging.getLogger("neutron-mcp.transactions")


@dataclass
class LightningInvoice:
    """Confirmed receive transaction with its BOLT11 invoice."""

    txn_id: str | None
    invoice: str | None
    qr_page_url: str | None
    amount_btc: float
    amount_sats: int
    status: str | None
    transaction: dict[str, Any] = field(default_factory=dict)


def build_receive_request(intent: LightningInvoiceIntent) -> TransactionRequest:
    """Lightning in, BTC wallet out, amount fixed on the destination side."""
    return TransactionRequest(
        ext_ref_id=intent.ext_ref_id or None,
        source_req=LegRequest(ccy="BTC", method="lightning"),
        dest_req=LegRequest(ccy="BTC", method="neutronpay", amt_requested=intent.btc_amount),
    )


class TransactionController:
    """Quote/confirm orchestration on top of NeutronClient."""

    def __init__(self, client: NeutronClient) -> None:
        self.client = client

    async def create_transaction(self, intent: TransactionIntent) -> Any:
        """
        Create a quoted transaction.

        Returns:
            The API's transaction object, unchanged (state "quoted")
        """
        body = build_transaction_request(intent).to_dict()
        logger.info(
            f"Creating transaction {intent.source_ccy}/{intent.source_method} -> "
            f"{intent.dest_ccy}/{intent.dest_method}"
        )
        return await self.client.create_transaction(body)

    async def confirm_transaction(self, transaction_id: str) -> Any:
        """
        Execute a quoted transaction.

        Repeated confirmations are not guarded locally; the API reports
        whatever state the transaction is in.
        """
        logger.info(f"Confirming transaction {transaction_id}")
        return await self.client.confirm_transaction(transaction_id)

    async def create_lightning_invoice(self, intent: LightningInvoiceIntent) -> LightningInvoice:
        """
        Create and immediately confirm a Lightning receive transaction.

        Returns:
            LightningInvoice with the invoice string and QR page URL taken
            from the confirmed transaction's sourceReq.reqDetails
        """
        btc_amount = intent.btc_amount
        body = build_receive_request(intent).to_dict()

        quoted = await self.client.create_transaction(body)
        txn_id = quoted.get("txnId") if isinstance(quoted, dict) else None
        if not txn_id:
            raise NeutronAPIError(0, "Transaction response did not include a txnId", quoted)

        confirmed = await self.confirm_transaction(txn_id)
        if not isinstance(confirmed, dict):
            confirmed = {}

        details = (confirmed.get("sourceReq") or {}).get("reqDetails") or {}
        invoice = details.get("paymentRequest")
        if invoice:
            logger.info(f"Lightning invoice created: {invoice[:30]}...")

        return LightningInvoice(
            txn_id=confirmed.get("txnId", txn_id),
            invoice=invoice,
            qr_page_url=details.get("invoicePageUrl"),
            amount_btc=btc_amount,
            amount_sats=btc_to_sats(btc_amount),
            status=confirmed.get("txnState"),
            transaction=confirmed,
        )
