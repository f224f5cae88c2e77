"""
Neutron MCP Exceptions

Error taxonomy shared by the client, the lending client and the tool layer.
"""

from typing import Any


class NeutronError(Exception):
    """Base exception for Neutron MCP errors."""

    pass


class ConfigurationError(NeutronError):
    """Raised when mandatory credentials are missing at startup."""

    pass


class AuthenticationError(NeutronError):
    """Raised when the token-signature handshake is rejected."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Authentication failed: {status_code} - {message}")


class NeutronAPIError(NeutronError):
    """Raised when an authenticated Neutron API call fails."""

    def __init__(self, status_code: int, message: str, body: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.body = body
        super().__init__(f"API Error {status_code}: {message}")


class LendingAPIError(NeutronError):
    """Raised when the lending service returns an error."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ToolArgumentError(NeutronError):
    """Raised when tool arguments fail validation at the boundary."""

    pass
