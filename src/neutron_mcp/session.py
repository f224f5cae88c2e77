"""
Session Manager

Bootstraps a Neutron access token with the HMAC token-signature handshake and
caches it until it expires. All authenticated calls go through
ensure_authenticated(), which is a no-op while the cached token is valid.
"""

import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from .config import NeutronSettings
from .exceptions import AuthenticationError
from .responses import decode_json, pick_error_message, status_text
from .signer import compute_signature

logger = logging.getLogger("neutron-mcp.session")

AUTH_PATH = "/api/v2/authentication/token-signature"

# Fixed probe body signed during the handshake
AUTH_PROBE = {"test": "auth"}

# Token lifetime assumed when the server omits expiredAt
DEFAULT_TOKEN_TTL_MS = 3_600_000

# fromisoformat before 3.11 only accepts 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


@dataclass
class Session:
    """Cached authentication state for the single configured account."""

    account_id: str
    access_token: str
    expires_at_ms: int
    auth_response: dict[str, Any] = field(default_factory=dict)

    def is_valid(self, now_ms: int) -> bool:
        """Whether the token is still usable at now_ms."""
        return now_ms < self.expires_at_ms

    @property
    def expired_at(self) -> Any:
        """Raw expiredAt value as reported by the server, if any."""
        return self.auth_response.get("expiredAt")


def _normalize_fraction(text: str) -> str:
    return _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)


def parse_expiry_ms(value: Any, now_ms: int) -> int:
    """
    Convert the server's expiredAt into epoch milliseconds.

    Accepts ISO-8601 strings (naive values are treated as UTC) and epoch
    milliseconds. Missing or unparseable values default to one hour from now.
    """
    if value is None or value == "" or isinstance(value, bool):
        return now_ms + DEFAULT_TOKEN_TTL_MS

    if isinstance(value, (int, float)):
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        try:
            parsed = datetime.fromisoformat(_normalize_fraction(text.replace("Z", "+00:00")))
        except ValueError:
            logger.warning(f"Unrecognised expiredAt {value!r}, assuming one hour")
            return now_ms + DEFAULT_TOKEN_TTL_MS
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp() * 1000)

    logger.warning(f"Unrecognised expiredAt {value!r}, assuming one hour")
    return now_ms + DEFAULT_TOKEN_TTL_MS


class SessionManager:
    """
    Owns the one Session of the process.

    States:
    - Unauthenticated: no cached session, or its expiry has passed
    - Authenticated: cached session present and not yet expired

    Concurrent callers that find the cache empty wait on a single in-flight
    handshake instead of each performing their own.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: NeutronSettings,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            http_client: Client whose base_url points at the Neutron API
            settings: Credentials used to sign the handshake
            clock: Wall-clock source in seconds (injectable for tests)
        """
        self._http = http_client
        self._settings = settings
        self._clock = clock
        self._session: Session | None = None
        self._lock = asyncio.Lock()

    @property
    def session(self) -> Session | None:
        """The cached session, valid or not."""
        return self._session

    @property
    def account_id(self) -> str | None:
        return self._session.account_id if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.is_valid(self._now_ms())

    def invalidate(self) -> None:
        """Drop the cached session; the next call re-authenticates."""
        self._session = None

    async def ensure_authenticated(self) -> Session:
        """
        Return a live session, performing the handshake only when needed.

        Raises:
            AuthenticationError: If the handshake is rejected
        """
        # Fast path without the lock
        session = self._session
        if session is not None and session.is_valid(self._now_ms()):
            return session

        async with self._lock:
            session = self._session
            if session is not None and session.is_valid(self._now_ms()):
                return session
            return await self._handshake()

    async def force_reauthenticate(self) -> Session:
        """
        Discard any cached session and perform exactly one handshake.

        Raises:
            AuthenticationError: If the handshake is rejected
        """
        async with self._lock:
            self._session = None
            return await self._handshake()

    async def _handshake(self) -> Session:
        self._session = None

        payload = json.dumps(AUTH_PROBE, separators=(",", ":"))
        signature = compute_signature(
            self._settings.api_key, self._settings.api_secret, payload
        )

        logger.info("Authenticating with Neutron API...")
        try:
            response = await self._http.post(
                AUTH_PATH,
                content=payload,
                headers={
                    "Content-Type": "application/json",
                    "X-Api-Key": self._settings.api_key,
                    "X-Api-Signature": signature,
                },
            )
        except httpx.RequestError as e:
            raise AuthenticationError(0, f"Request failed: {e!s}") from e

        body = decode_json(response)

        if not response.is_success:
            message = pick_error_message(body, ("message", "error"), status_text(response))
            logger.warning(f"Authentication rejected: {response.status_code} - {message}")
            raise AuthenticationError(response.status_code, message)

        if not isinstance(body, dict) or not body.get("accessToken") or not body.get("accountId"):
            raise AuthenticationError(
                response.status_code, "Response did not contain accountId and accessToken"
            )

        now_ms = self._now_ms()
        self._session = Session(
            account_id=str(body["accountId"]),
            access_token=str(body["accessToken"]),
            expires_at_ms=parse_expiry_ms(body.get("expiredAt"), now_ms),
            auth_response=body,
        )
        logger.info(f"Authenticated as account {self._session.account_id}")
        return self._session

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)
