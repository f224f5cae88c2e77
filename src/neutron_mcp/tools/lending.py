"""
Lending Tools

BTC-collateralized USDt loans. Most tools forward to the lending service
unchanged; create, status, rollover and settle add local orchestration:

- create: optionally opens the 2-of-3 multisig DLC contract for the loan
- status: attaches on-chain verification links for the collateral
- rollover: refuses until the user has accepted the rollover terms
- settle: checks the loan is repaid before releasing collateral
"""

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import LendingAPIError, ToolArgumentError
from ..models import btc_to_sats

if TYPE_CHECKING:
    from ..lending_client import LendingClient

logger = logging.getLogger("neutron-mcp.tools.lending")

MEMPOOL_URL = "https://mempool.space"
SETTLEMENT_EXPLORER_URL = "https://mempool.space/testnet4/tx"

DLC_CREATE_FAILED = "Failed to create DLC contract"

ROLLOVER_TERMS_MESSAGE = (
    "Terms not accepted. You must present rollover terms to the user first: "
    "$500 flat fee, +1% interest rate increase, 1-year extension, non-refundable. "
    "Set acceptTerms=true only after explicit user confirmation."
)

VERIFICATION_NOTE = (
    "Share these links as proof that BTC collateral is locked in a 2-of-3 multisig "
    "and cannot be moved without 2 key holders signing."
)


async def simulate_loan(btc_amount: float, ltv_ratio: float, lending: "LendingClient") -> Any:
    return await lending.simulate(btc_amount, ltv_ratio)


async def quote_loan(
    agent_id: str, btc_amount: float, ltv_ratio: float, lending: "LendingClient"
) -> Any:
    """Lock the BTC price for a few minutes; returns a quoteId for create_loan()."""
    return await lending.quote(agent_id, btc_amount, ltv_ratio)


async def create_loan(
    agent_id: str,
    btc_amount: float,
    ltv_ratio: float,
    return_address: str,
    usdt_receive_address: str,
    lending: "LendingClient",
    quote_id: str | None = None,
    borrower_pubkey: str | None = None,
) -> Any:
    """
    Create a loan and, when a borrower pubkey is given, its DLC contract.

    The contract carries the multisig deposit address the borrower funds.
    A contract failure does not fail the loan; it is reported in dlcError.

    Returns:
        The created loan, with dlcContractId, depositAddress, multisig and
        explorer.multisigAddress merged in when the contract was opened
    """
    loan = await lending.create_loan(
        {
            "agentId": agent_id,
            "btcAmount": btc_amount,
            "ltvRatio": ltv_ratio,
            "returnAddress": return_address,
            "usdtReceiveAddress": usdt_receive_address,
            "quoteId": quote_id or None,
        }
    )

    if not borrower_pubkey or not isinstance(loan, dict) or not loan.get("id"):
        return loan

    try:
        contract = await lending.create_dlc_contract(
            {
                "loanId": loan["id"],
                "borrowerPubkey": borrower_pubkey,
                "collateralSats": btc_to_sats(btc_amount),
                "liquidationPrice": loan.get("liquidationPrice"),
                "returnAddress": return_address,
            }
        )
    except LendingAPIError as e:
        logger.warning(f"DLC contract for loan {loan['id']} failed: {e}")
        loan["dlcError"] = str(e) or DLC_CREATE_FAILED
        return loan

    if not isinstance(contract, dict):
        logger.warning(f"DLC contract for loan {loan['id']} returned no contract")
        loan["dlcError"] = DLC_CREATE_FAILED
        return loan

    multisig = contract.get("multisig")
    explorer = contract.get("explorer")
    loan["dlcContractId"] = contract.get("contractId")
    loan["depositAddress"] = (
        multisig.get("address") if isinstance(multisig, dict) else None
    ) or contract.get("depositAddress")
    loan["multisig"] = multisig
    loan["explorer"] = {
        **(loan.get("explorer") or {}),
        "multisigAddress": explorer.get("multisigAddress") if isinstance(explorer, dict) else None,
    }
    return loan


async def confirm_collateral(
    loan_id: str, btc_deposit_txid: str, confirmations: int, lending: "LendingClient"
) -> Any:
    return await lending.confirm_collateral(loan_id, btc_deposit_txid, confirmations)


async def disburse_loan(loan_id: str, lending: "LendingClient") -> Any:
    return await lending.disburse(loan_id)


def _verification_links(contract: dict[str, Any]) -> dict[str, Any]:
    address = contract.get("depositAddress")
    txid = contract.get("fundingTxid")
    return {
        "multisigAddress": f"{MEMPOOL_URL}/address/{address}" if address else None,
        "fundingTransaction": (
            f"{MEMPOOL_URL}/tx/{txid}" if txid and txid != "pending" else None
        ),
        "note": VERIFICATION_NOTE,
    }


async def get_loan_status(loan_id: str, lending: "LendingClient") -> Any:
    """
    Loan status with collateral verification links.

    The DLC contract lookup is best effort: loans without a contract are
    returned as the lending service reports them.
    """
    loan = await lending.get_loan(loan_id)

    try:
        contract = await lending.get_dlc_contract_by_loan(loan_id)
    except LendingAPIError as e:
        logger.debug(f"No DLC contract for loan {loan_id}: {e}")
        return loan

    if not isinstance(contract, dict) or not contract or not isinstance(loan, dict):
        return loan

    return {
        **loan,
        "dlcContract": {
            "status": contract.get("status"),
            "multisig": contract.get("multisig"),
            "depositAddress": contract.get("depositAddress"),
            "fundingTxid": contract.get("fundingTxid"),
            "verification": _verification_links(contract),
        },
    }


async def repay_loan(
    loan_id: str,
    usdt_amount: float,
    lending: "LendingClient",
    eth_txid: str | None = None,
    from_address: str | None = None,
) -> Any:
    return await lending.repay(loan_id, usdt_amount, eth_txid, from_address)


async def list_loans(agent_id: str, lending: "LendingClient") -> Any:
    return await lending.list_loans(agent_id)


async def rollover_loan(loan_id: str, accept_terms: bool, lending: "LendingClient") -> Any:
    """
    Extend a loan by one year.

    Raises:
        ToolArgumentError: Unless the user explicitly accepted the terms
    """
    if not accept_terms:
        raise ToolArgumentError(ROLLOVER_TERMS_MESSAGE)
    logger.info(f"Rolling over loan {loan_id}")
    return await lending.rollover(loan_id)


async def check_liquidation(loan_id: str, lending: "LendingClient") -> Any:
    return await lending.check_liquidation(loan_id)


async def get_btc_price(lending: "LendingClient") -> Any:
    return await lending.get_btc_price()


async def settle_loan(loan_id: str, lending: "LendingClient") -> dict[str, Any]:
    """
    Release the collateral of a fully repaid loan back to the borrower.

    Raises:
        ToolArgumentError: If the loan is not repaid or has no DLC contract
    """
    loan = await lending.get_loan(loan_id)
    status = loan.get("status") if isinstance(loan, dict) else None
    if status != "repaid":
        remaining = (loan.get("remainingOwed") if isinstance(loan, dict) else None) or "unknown"
        raise ToolArgumentError(
            f"Loan status is '{status}', must be 'repaid' to settle. Remaining owed: ${remaining}"
        )

    contract = await lending.get_dlc_contract_by_loan(loan_id)
    contract_id = contract.get("contractId") if isinstance(contract, dict) else None
    if not contract_id:
        raise ToolArgumentError(
            "No DLC contract found for this loan. Cannot settle without multisig."
        )

    logger.info(f"Settling loan {loan_id} via contract {contract_id}")
    settlement = await lending.settle_dlc_contract(contract_id)
    if not isinstance(settlement, dict):
        settlement = {}
    txid = settlement.get("txid")

    return {
        "success": True,
        "loanId": loan_id,
        "contractId": contract_id,
        "settlementTxid": txid or settlement.get("settlementTxid"),
        "returnAddress": loan.get("returnAddress"),
        "explorer": f"{SETTLEMENT_EXPLORER_URL}/{txid}" if txid else None,
        "message": (
            "BTC collateral released from multisig back to borrower. "
            "Settlement transaction broadcast to network."
        ),
    }


async def get_notifications(
    agent_id: str, lending: "LendingClient", unread_only: bool = False
) -> Any:
    return await lending.get_notifications(agent_id, unread_only)
