"""
Request Signer

HMAC-SHA256 signature used by the token-signature authentication endpoint.
"""

import hashlib
import hmac


def build_string_to_sign(api_key: str, payload: str) -> str:
    """Return the canonical string covered by the signature."""
    return f"{api_key}&payload={payload}"


def compute_signature(api_key: str, api_secret: str, payload: str) -> str:
    """
    Sign a payload with the API secret.

    Args:
        api_key: Neutron API key (part of the signed string)
        api_secret: Neutron API secret (HMAC key)
        payload: Exact request body that will be sent

    Returns:
        Lowercase hex HMAC-SHA256 digest
    """
    return hmac.new(
        api_secret.encode("utf-8"),
        build_string_to_sign(api_key, payload).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
