"""
Receive Address Tools

Static deposit addresses for on-chain BTC and USDT.
"""

from typing import TYPE_CHECKING, Any

from ..exceptions import ToolArgumentError

if TYPE_CHECKING:
    from ..client import NeutronClient

USDT_CHAINS = ("TRON", "ETH")


async def get_btc_address(client: "NeutronClient") -> Any:
    """Reusable SegWit (bc1q...) deposit address."""
    return await client.get_btc_receive_address()


async def get_usdt_address(client: "NeutronClient", chain: str | None = None) -> Any:
    """
    USDT deposit address on TRON (TRC-20, default) or Ethereum (ERC-20).

    Raises:
        ToolArgumentError: If chain is not TRON or ETH
    """
    chain_id = (chain or "TRON").upper()
    if chain_id not in USDT_CHAINS:
        raise ToolArgumentError(f"chain must be one of {', '.join(USDT_CHAINS)}, got {chain!r}")
    return await client.get_usdt_receive_address(chain_id)
