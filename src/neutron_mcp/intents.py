"""
Tool argument intents.

Raw MCP tool arguments arrive as an untyped dict. The helpers and dataclasses
here validate them once at the boundary so the rest of the code works with
typed values.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import ToolArgumentError
from .models import sats_to_btc

KYC_TYPES = ("individual", "business")


def require_str(arguments: Mapping[str, Any], key: str) -> str:
    """Return a required, non-empty string argument."""
    value = arguments.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ToolArgumentError(f"Missing required argument: {key}")
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument {key} must be a string")
    return value


def optional_str(arguments: Mapping[str, Any], key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument {key} must be a string")
    return value


def optional_number(arguments: Mapping[str, Any], key: str) -> Optional[float]:
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ToolArgumentError(f"Argument {key} must be a number")
    return value


def require_number(arguments: Mapping[str, Any], key: str) -> float:
    value = optional_number(arguments, key)
    if value is None:
        raise ToolArgumentError(f"Missing required argument: {key}")
    return value


def optional_bool(arguments: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ToolArgumentError(f"Argument {key} must be a boolean")
    return value


@dataclass(frozen=True)
class TransactionIntent:
    """
    Caller-facing description of a payment on any rail.

    Amounts are in the currency's major unit (BTC, not sats). Only one of
    source_amount / dest_amount is meant to be set; the API quotes the other
    side. Setting both is passed through unchanged and the API decides.
    """

    source_ccy: str
    source_method: str
    dest_ccy: str
    dest_method: str
    source_amount: Optional[float] = None
    dest_amount: Optional[float] = None
    payment_request: Optional[str] = None
    lnurl: Optional[str] = None
    address: Optional[str] = None
    bank_acct_num: Optional[str] = None
    institution_code: Optional[str] = None
    recipient_name: Optional[str] = None
    country_code: Optional[str] = None
    kyc_type: Optional[str] = None
    ext_ref_id: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "TransactionIntent":
        """Validate neutron_create_transaction arguments."""
        kyc_type = optional_str(arguments, "kycType")
        if kyc_type is not None and kyc_type not in KYC_TYPES:
            raise ToolArgumentError(
                f"kycType must be one of {', '.join(KYC_TYPES)}, got {kyc_type!r}"
            )

        return cls(
            source_ccy=require_str(arguments, "sourceCcy"),
            source_method=require_str(arguments, "sourceMethod"),
            dest_ccy=require_str(arguments, "destCcy"),
            dest_method=require_str(arguments, "destMethod"),
            source_amount=optional_number(arguments, "sourceAmount"),
            dest_amount=optional_number(arguments, "destAmount"),
            payment_request=optional_str(arguments, "paymentRequest"),
            lnurl=optional_str(arguments, "lnurl"),
            address=optional_str(arguments, "address"),
            bank_acct_num=optional_str(arguments, "bankAcctNum"),
            institution_code=optional_str(arguments, "institutionCode"),
            recipient_name=optional_str(arguments, "recipientName"),
            country_code=optional_str(arguments, "countryCode"),
            kyc_type=kyc_type,
            ext_ref_id=optional_str(arguments, "extRefId"),
        )


@dataclass(frozen=True)
class LightningInvoiceIntent:
    """Request to receive a Lightning payment into the BTC wallet."""

    amount_sats: Optional[int] = None
    amount_btc: Optional[float] = None
    memo: Optional[str] = None
    ext_ref_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.amount_sats is None and self.amount_btc is None:
            raise ToolArgumentError("Provide either amountSats or amountBtc")

    @property
    def btc_amount(self) -> float:
        """Requested amount in BTC. amount_sats wins when both are given."""
        if self.amount_sats is not None:
            return sats_to_btc(self.amount_sats)
        return self.amount_btc  # type: ignore[return-value]

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "LightningInvoiceIntent":
        """Validate neutron_create_lightning_invoice arguments."""
        return cls(
            amount_sats=optional_number(arguments, "amountSats"),
            amount_btc=optional_number(arguments, "amountBtc"),
            memo=optional_str(arguments, "memo"),
            ext_ref_id=optional_str(arguments, "extRefId"),
        )
