"""
Canonical transaction request types.

These mirror the body of POST /api/v2/transaction. Optional fields that are
unset are omitted from to_dict() output, never serialized as null, because
the API treats an explicit amount differently from an absent one.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

SATS_PER_BTC = 100_000_000


def sats_to_btc(amount_sats: int) -> float:
    """Convert satoshis to BTC."""
    return amount_sats / SATS_PER_BTC


def btc_to_sats(amount_btc: float) -> int:
    """Convert BTC to whole satoshis, rounding to the nearest satoshi."""
    return round(amount_btc * SATS_PER_BTC)


@dataclass(frozen=True)
class KycBlock:
    """Recipient identity attached to regulated fiat payouts."""

    type: str = "individual"
    legal_full_name: Optional[str] = None
    country_code: Optional[str] = None

    def to_dict(self) -> dict:
        details = {}
        if self.legal_full_name is not None:
            details["legalFullName"] = self.legal_full_name
        if self.country_code is not None:
            details["countryCode"] = self.country_code
        return {"type": self.type, "details": details}


@dataclass(frozen=True)
class SourceOfFunds:
    """
    Source-of-funds declaration for fiat payouts.

    The API accepts richer enumerations; these integers are the one fixed
    set sent for every payout.
    """

    purpose: int = 1
    source: int = 5
    relationship: int = 3

    def to_dict(self) -> dict:
        return {
            "purpose": self.purpose,
            "source": self.source,
            "relationship": self.relationship,
        }


@dataclass(frozen=True)
class LegRequest:
    """One side (source or destination) of a transaction."""

    ccy: str
    method: str
    amt_requested: Optional[float] = None
    req_details: dict[str, Any] = field(default_factory=dict)
    kyc: Optional[KycBlock] = None

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"ccy": self.ccy, "method": self.method}
        if self.amt_requested is not None:
            result["amtRequested"] = self.amt_requested
        result["reqDetails"] = dict(self.req_details)
        if self.kyc is not None:
            result["kyc"] = self.kyc.to_dict()
        return result


@dataclass(frozen=True)
class TransactionRequest:
    """Canonical transaction-creation request."""

    source_req: LegRequest
    dest_req: LegRequest
    ext_ref_id: Optional[str] = None
    source_of_funds: Optional[SourceOfFunds] = None

    def to_dict(self) -> dict:
        result: dict[str, Any] = {}
        if self.ext_ref_id:
            result["extRefId"] = self.ext_ref_id
        result["sourceReq"] = self.source_req.to_dict()
        result["destReq"] = self.dest_req.to_dict()
        if self.source_of_funds is not None:
            result["sourceOfFunds"] = self.source_of_funds.to_dict()
        return result
