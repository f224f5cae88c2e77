"""
Transaction Tools

Create, confirm and inspect transactions on any rail, plus the one-call
Lightning invoice shortcut.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import NeutronClient
    from ..intents import LightningInvoiceIntent, TransactionIntent
    from ..transactions import TransactionController

LIST_FILTERS = ("status", "method", "currency", "fromDate", "toDate", "limit", "offset")


async def create_lightning_invoice(
    intent: "LightningInvoiceIntent",
    controller: "TransactionController",
) -> dict[str, Any]:
    """
    Create a Lightning invoice to receive Bitcoin.

    The receive transaction is created and confirmed in the same call, so the
    returned invoice is immediately payable.

    Args:
        intent: Amount (sats or BTC), memo and optional external reference
        controller: Transaction controller bound to the shared client

    Returns:
        Invoice string, QR page URL, amounts in BTC and sats, and status
    """
    invoice = await controller.create_lightning_invoice(intent)
    return {
        "success": True,
        "txnId": invoice.txn_id,
        "invoice": invoice.invoice,
        "qrPageUrl": invoice.qr_page_url,
        "amountBtc": invoice.amount_btc,
        "amountSats": invoice.amount_sats,
        "memo": intent.memo or None,
        "status": invoice.status,
        "message": (
            "Lightning invoice created and confirmed. "
            "Share the invoice string or QR page URL to receive payment."
        ),
    }


async def create_transaction(
    intent: "TransactionIntent",
    controller: "TransactionController",
) -> Any:
    """
    Create a quoted transaction.

    The result must be confirmed with confirm_transaction() to execute.
    """
    return await controller.create_transaction(intent)


async def confirm_transaction(
    transaction_id: str,
    controller: "TransactionController",
) -> Any:
    return await controller.confirm_transaction(transaction_id)


async def get_transaction(transaction_id: str, client: "NeutronClient") -> Any:
    return await client.get_transaction(transaction_id)


async def list_transactions(arguments: dict[str, Any], client: "NeutronClient") -> Any:
    """
    List transactions, forwarding only the recognised filters that are set.
    """
    filters = {key: arguments.get(key) for key in LIST_FILTERS}
    return await client.list_transactions(**filters)
