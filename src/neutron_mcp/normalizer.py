"""
Transaction Normalizer

Maps a TransactionIntent onto the canonical quote request. This is a pure
structural mapping: currency/method compatibility and the single-sided amount
rule are enforced by the API, not here.
"""

from typing import Any

from .intents import TransactionIntent
from .models import KycBlock, LegRequest, SourceOfFunds, TransactionRequest

# Fixed declaration sent with every fiat payout
FIAT_PAYOUT_SOURCE_OF_FUNDS = SourceOfFunds(purpose=1, source=5, relationship=3)

# Intent attribute -> destination reqDetails key
_DEST_DETAIL_FIELDS = (
    ("payment_request", "paymentRequest"),
    ("lnurl", "lnurl"),
    ("address", "address"),
    ("bank_acct_num", "bankAcctNum"),
    ("institution_code", "institutionCode"),
)


def build_dest_details(intent: TransactionIntent) -> dict[str, Any]:
    """Collect the rail-specific destination fields that were supplied."""
    details: dict[str, Any] = {}
    for attr, key in _DEST_DETAIL_FIELDS:
        value = getattr(intent, attr)
        if value:
            details[key] = value
    return details


def build_kyc(intent: TransactionIntent) -> KycBlock | None:
    """KYC is attached only when a recipient name or country is given."""
    if not intent.recipient_name and not intent.country_code:
        return None
    return KycBlock(
        type=intent.kyc_type or "individual",
        legal_full_name=intent.recipient_name,
        country_code=intent.country_code,
    )


def build_source_of_funds(intent: TransactionIntent) -> SourceOfFunds | None:
    """A bank account number marks the transaction as a fiat payout."""
    if not intent.bank_acct_num:
        return None
    return FIAT_PAYOUT_SOURCE_OF_FUNDS


def build_transaction_request(intent: TransactionIntent) -> TransactionRequest:
    """
    Build the canonical transaction request for an intent.

    Args:
        intent: Validated transaction intent

    Returns:
        TransactionRequest; call to_dict() for the wire body
    """
    return TransactionRequest(
        ext_ref_id=intent.ext_ref_id or None,
        source_req=LegRequest(
            ccy=intent.source_ccy,
            method=intent.source_method,
            amt_requested=intent.source_amount,
        ),
        dest_req=LegRequest(
            ccy=intent.dest_ccy,
            method=intent.dest_method,
            amt_requested=intent.dest_amount,
            req_details=build_dest_details(intent),
            kyc=build_kyc(intent),
        ),
        source_of_funds=build_source_of_funds(intent),
    )
