"""
HTTP response helpers shared by the Neutron and lending clients.
"""

from typing import Any, Iterable
from urllib.parse import quote

import httpx


def decode_json(response: httpx.Response) -> Any:
    """
    Decode a JSON response body.

    Empty or non-JSON bodies decode to an empty dict.
    """
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


def pick_error_message(body: Any, keys: Iterable[str], fallback: str) -> str:
    """Return the first non-empty string field of an error body, in key order."""
    if isinstance(body, dict):
        for key in keys:
            value = body.get(key)
            if value:
                return str(value)
    return fallback


def status_text(response: httpx.Response) -> str:
    """HTTP reason phrase, or the bare status code when the server sent none."""
    return response.reason_phrase or str(response.status_code)


def path_segment(value: str) -> str:
    """Escape a caller-supplied value used as a single URL path segment."""
    return quote(str(value), safe="")
