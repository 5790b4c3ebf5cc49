"""
Configuration management for nbipam.

Loads the NetBox address, API token and client defaults from
environment variables or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

# Check common locations for .env
env_locations = [
    Path.home() / ".nbipam" / ".env",
    Path.home() / ".config" / "nbipam" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


# Every API route lives under this path on the NetBox host
API_BASE_PATH = "/api"
DEFAULT_SCHEME = "https"
ALLOWED_SCHEMES = ("http", "https")


class ConfigError(ValueError):
    """Invalid or missing client configuration."""
    pass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


@dataclass
class NetBoxConfig:
    """NetBox connection settings and client defaults."""

    # NetBox instance, "netbox.example.com" or "https://netbox.example.com"
    host: str = ""
    token: str = ""

    # Default VRF filter; empty means "all VRFs"
    vrf: str = ""

    debug: bool = False
    timeout: float = 30.0
    verify_ssl: bool = True

    # Parallel count queries issued by the VRF summary report
    summary_concurrency: int = 8

    @classmethod
    def from_env(cls) -> "NetBoxConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("NETBOX_HOST", ""),
            token=os.getenv("NETBOX_TOKEN", ""),
            vrf=os.getenv("NETBOX_VRF", ""),
            debug=_env_bool("NETBOX_DEBUG", False),
            timeout=_env_float("NETBOX_TIMEOUT", 30.0),
            verify_ssl=_env_bool("NETBOX_VERIFY_SSL", True),
            summary_concurrency=_env_int("NETBOX_CONCURRENCY", 8),
        )

    def api_url(self) -> str:
        """
        Build the API base URL from the configured host.

        Only the scheme and network location of the host string are used;
        the API base path is always appended. A host without a scheme is
        reached over HTTPS.

        Raises:
            ConfigError: If the host is missing or cannot be parsed
        """
        if not self.host:
            raise ConfigError("NetBox host is not set (use --host or NETBOX_HOST)")

        raw = self.host.strip()
        if "://" not in raw:
            raw = f"{DEFAULT_SCHEME}://{raw}"

        try:
            parts = urlsplit(raw)
            # Accessing .port validates the port component
            parts.port
        except ValueError as e:
            raise ConfigError(f"Invalid NetBox host {self.host!r}: {e}")

        scheme = parts.scheme.lower()
        if scheme not in ALLOWED_SCHEMES:
            raise ConfigError(f"Invalid NetBox host {self.host!r}: unsupported scheme {parts.scheme!r}")
        if not parts.hostname:
            raise ConfigError(f"Invalid NetBox host {self.host!r}: no hostname")

        return f"{scheme}://{parts.netloc}{API_BASE_PATH}/"

    def require_token(self) -> str:
        """Return the API token, failing if none is configured."""
        if not self.token:
            raise ConfigError("NetBox token is not set (use --token or NETBOX_TOKEN)")
        return self.token


# Global config instance
_config: NetBoxConfig | None = None


def get_config() -> NetBoxConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = NetBoxConfig.from_env()
    return _config


def set_config(config: NetBoxConfig | None) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
