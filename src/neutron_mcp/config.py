"""
Configuration

Loads Neutron credentials and endpoints from the environment, falling back to
~/.neutron-mcp/config.json for values the environment does not set.
Configuration is READ-ONLY at runtime - the server never writes the file.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger("neutron-mcp.config")

DEFAULT_API_URL = "https://api.neutron.me"
DEFAULT_LENDING_URL = "http://localhost:3001"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_CONFIG_PATH = Path.home() / ".neutron-mcp" / "config.json"


@dataclass(frozen=True)
class FileSettings:
    """
    Values read from the optional config file.
    Every field is optional; environment variables take precedence.
    """

    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    api_url: Optional[str] = None
    lending_url: Optional[str] = None
    http_timeout: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FileSettings":
        """Create FileSettings from a dictionary."""
        timeout = data.get("httpTimeout")
        return cls(
            api_key=data.get("apiKey"),
            api_secret=data.get("apiSecret"),
            api_url=data.get("apiUrl"),
            lending_url=data.get("lendingUrl"),
            http_timeout=float(timeout) if timeout is not None else None,
        )


@dataclass(frozen=True)
class NeutronSettings:
    """
    Credentials and endpoints, fixed for the process lifetime.

    Note: This dataclass is frozen (immutable) - tools cannot modify it.
    """

    api_key: str
    api_secret: str
    api_url: str = DEFAULT_API_URL
    lending_url: str = DEFAULT_LENDING_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "lending_url", self.lending_url.rstrip("/"))

    def __repr__(self) -> str:
        return (
            f"NeutronSettings(api_key={self.api_key[:4]}..., api_url={self.api_url!r}, "
            f"lending_url={self.lending_url!r}, http_timeout={self.http_timeout})"
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        config_path: Path | str | None = None,
    ) -> "NeutronSettings":
        """
        Build settings from environment variables and the config file.

        Environment variables:
            NEUTRON_API_KEY: Required
            NEUTRON_API_SECRET: Required
            NEUTRON_API_URL: Optional (default https://api.neutron.me)
            NEUTRON_LENDING_URL: Optional (default http://localhost:3001)
            NEUTRON_HTTP_TIMEOUT: Optional, seconds (default 30)
            NEUTRON_CONFIG_FILE: Optional path overriding ~/.neutron-mcp/config.json

        Raises:
            ConfigurationError: If the API key or secret is missing
        """
        env = os.environ if environ is None else environ
        path = Path(config_path or env.get("NEUTRON_CONFIG_FILE") or DEFAULT_CONFIG_PATH)
        file_settings = load_config_file(path)

        api_key = env.get("NEUTRON_API_KEY") or file_settings.api_key
        api_secret = env.get("NEUTRON_API_SECRET") or file_settings.api_secret

        if not api_key or not api_secret:
            raise ConfigurationError(
                "NEUTRON_API_KEY and NEUTRON_API_SECRET environment variables are required. "
                "Get your credentials at https://neutron.me"
            )

        timeout_value = env.get("NEUTRON_HTTP_TIMEOUT")
        try:
            http_timeout = (
                float(timeout_value)
                if timeout_value
                else file_settings.http_timeout or DEFAULT_HTTP_TIMEOUT
            )
        except ValueError as e:
            raise ConfigurationError(
                f"NEUTRON_HTTP_TIMEOUT must be a number of seconds, got {timeout_value!r}"
            ) from e

        return cls(
            api_key=api_key,
            api_secret=api_secret,
            api_url=env.get("NEUTRON_API_URL") or file_settings.api_url or DEFAULT_API_URL,
            lending_url=(
                env.get("NEUTRON_LENDING_URL")
                or file_settings.lending_url
                or DEFAULT_LENDING_URL
            ),
            http_timeout=http_timeout,
        )


def load_config_file(path: Path) -> FileSettings:
    """
    Read the optional JSON config file.

    A missing file yields empty settings. An unreadable or malformed file is
    logged and ignored.
    """
    if not path.exists():
        return FileSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value must be an object")
        settings = FileSettings.from_dict(data)
        logger.info(f"Loaded config from {path}")
        return settings
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load config from {path}: {e}")
        return FileSettings()
