"""
Neutron MCP Tools

Tool implementations, one module per Neutron API area plus lending.
"""

from . import account, lending, lightning, receive, reference, transactions, webhooks

__all__ = [
    "account",
    "lending",
    "lightning",
    "receive",
    "reference",
    "transactions",
    "webhooks",
]
