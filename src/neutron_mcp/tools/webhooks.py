"""
Webhook Tools

Register and manage transaction state-change callbacks.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import NeutronClient

logger = logging.getLogger("neutron-mcp.tools.webhooks")


async def create_webhook(callback: str, secret: str, client: "NeutronClient") -> Any:
    """
    Register a webhook.

    Args:
        callback: HTTPS endpoint receiving notifications
        secret: Used by Neutron to sign deliveries (X-Neutronpay-Signature)
    """
    logger.info(f"Registering webhook {callback}")
    return await client.create_webhook(callback, secret)


async def list_webhooks(client: "NeutronClient") -> Any:
    return await client.list_webhooks()


async def update_webhook(
    webhook_id: str,
    client: "NeutronClient",
    callback: str | None = None,
    secret: str | None = None,
) -> Any:
    """Update a webhook's callback URL and/or secret; unset fields are left alone."""
    body = {}
    if callback is not None:
        body["callback"] = callback
    if secret is not None:
        body["secret"] = secret
    return await client.update_webhook(webhook_id, body)


async def delete_webhook(webhook_id: str, client: "NeutronClient") -> dict[str, Any]:
    await client.delete_webhook(webhook_id)
    logger.info(f"Deleted webhook {webhook_id}")
    return {"success": True, "message": f"Webhook {webhook_id} deleted."}
