"""
Lightning Tools

Invoice decoding and Lightning Address / LNURL resolution. All parsing is
done by the Neutron API; nothing is decoded locally.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import NeutronClient

logger = logging.getLogger("neutron-mcp.tools.lightning")


async def decode_invoice(invoice: str, client: "NeutronClient") -> Any:
    """Decode a BOLT11 invoice: amount, expiry, destination, payment status."""
    normalized = invoice.strip()
    logger.info(f"Decoding invoice: {normalized[:30]}...")
    return await client.decode_invoice(normalized)


async def resolve_lightning_address(
    address: str,
    client: "NeutronClient",
    amount_msat: int | None = None,
) -> Any:
    """Look up a Lightning Address (user@domain) and its min/max amounts."""
    return await client.resolve_lightning_address(address.strip(), amount_msat)


async def resolve_lnurl(lnurl: str, client: "NeutronClient") -> Any:
    return await client.resolve_lnurl(lnurl.strip())
