"""
Account Tools

Credential check, account details and wallet balances.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import NeutronClient


async def authenticate(client: "NeutronClient") -> dict[str, Any]:
    """
    Verify the configured API credentials.

    Always performs a fresh handshake, even when a valid token is cached.

    Returns:
        Account ID and token expiry reported by the API
    """
    session = await client.authenticate()
    return {
        "success": True,
        "accountId": session.account_id,
        "tokenExpiry": session.expired_at,
        "message": "Authentication successful. Your API credentials are valid.",
    }


async def get_account(client: "NeutronClient") -> Any:
    """Account details: display name, status, country, timezone, sub-accounts."""
    return await client.get_account()


async def get_wallets(client: "NeutronClient") -> Any:
    """All wallets with total and available balances."""
    return await client.get_wallets()


async def get_wallet(wallet_id: str, client: "NeutronClient") -> Any:
    return await client.get_wallet(wallet_id)
