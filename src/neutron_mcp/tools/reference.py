"""
Reference Data Tools

Exchange rates and the fiat institution directory used for payouts.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import NeutronClient


async def get_rate(client: "NeutronClient") -> Any:
    """BTC exchange rates against every supported currency."""
    return await client.get_rate()


async def get_fiat_institutions(country_code: str, client: "NeutronClient") -> Any:
    """
    Banks and institutions for a country.

    The returned institution codes are what fiat payouts expect in
    institutionCode.
    """
    return await client.get_fiat_institutions(country_code.strip().upper())
