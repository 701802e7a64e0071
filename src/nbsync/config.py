"""Connection settings for the NetBox inventory service.

Settings are read from environment variables (a local ``.env`` file is
loaded first when present):

    NETBOX_URL               Base URL of the NetBox instance (required)
    NETBOX_API_TOKEN         API token sent as ``Authorization: Token ...`` (required)
    NETBOX_TIMEOUT           Total request timeout in seconds (default: 60)
    NETBOX_VERIFY_SSL        Verify TLS certificates (default: true)
    NETBOX_AUTO_CREATE_TAGS  Create unknown tags instead of failing (default: false)
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .api.exceptions import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class NetBoxSettings:
    """Connection settings for one NetBox instance.

    Attributes:
        url: Base URL, without trailing slash
        token: API token
        timeout: Total request timeout in seconds
        verify_ssl: Whether TLS certificates are verified
        auto_create_tags: Tag resolution policy for unknown tag names
    """

    url: str
    token: str
    timeout: float = 60.0
    verify_ssl: bool = True
    auto_create_tags: bool = False

    def __post_init__(self):
        object.__setattr__(self, "url", self.url.rstrip("/"))

    @classmethod
    def from_env(cls, url: Optional[str] = None, token: Optional[str] = None) -> "NetBoxSettings":
        """Build settings from explicit values, falling back to the environment.

        Raises:
            ConfigurationError: If the URL or token is missing, or the timeout
                is not a positive number.
        """
        url = url or os.getenv("NETBOX_URL", "")
        token = token or os.getenv("NETBOX_API_TOKEN", "")

        missing = []
        if not url:
            missing.append("NETBOX_URL")
        if not token:
            missing.append("NETBOX_API_TOKEN")
        if missing:
            raise ConfigurationError(
                f"Missing required NetBox settings: {', '.join(missing)}",
                missing_keys=missing,
            )

        raw_timeout = os.getenv("NETBOX_TIMEOUT", "60")
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"NETBOX_TIMEOUT must be a number, got {raw_timeout!r}",
                cause=e,
            )
        if timeout <= 0:
            raise ConfigurationError(f"NETBOX_TIMEOUT must be positive, got {timeout}")

        settings = cls(
            url=url,
            token=token,
            timeout=timeout,
            verify_ssl=_env_bool("NETBOX_VERIFY_SSL", True),
            auto_create_tags=_env_bool("NETBOX_AUTO_CREATE_TAGS", False),
        )
        logger.debug(f"Loaded NetBox settings for {settings.url}")
        return settings
