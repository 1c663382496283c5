"""Runtime configuration for the bridge."""

from __future__ import annotations

import os
from dataclasses import dataclass

from flexsms.errors import ConfigError

DEFAULT_FLEX_API_BASE = "https://flex-api.twilio.com/v1"
DEFAULT_PROXY_API_BASE = "https://proxy.twilio.com/v1"

_REQUIRED = ("ACCOUNT_SID", "AUTH_TOKEN", "TWILIO_PROXY_SERVICE_SID")


@dataclass(frozen=True)
class BridgeConfig:
    account_sid: str
    auth_token: str
    proxy_service_sid: str
    flex_api_base: str = DEFAULT_FLEX_API_BASE
    proxy_api_base: str = DEFAULT_PROXY_API_BASE
    audit_log_path: str | None = None

    @classmethod
    def from_env(cls) -> BridgeConfig:
        """Build the config from environment variables.

        Raises:
            ConfigError: If any of ACCOUNT_SID, AUTH_TOKEN or
                TWILIO_PROXY_SERVICE_SID is unset or empty.
        """
        missing = [name for name in _REQUIRED if not os.environ.get(name)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return cls(
            account_sid=os.environ["ACCOUNT_SID"],
            auth_token=os.environ["AUTH_TOKEN"],
            proxy_service_sid=os.environ["TWILIO_PROXY_SERVICE_SID"],
            flex_api_base=os.environ.get("FLEX_API_BASE", DEFAULT_FLEX_API_BASE),
            proxy_api_base=os.environ.get("PROXY_API_BASE", DEFAULT_PROXY_API_BASE),
            audit_log_path=os.environ.get("AUDIT_LOG_PATH") or None,
        )
