"""Exceptions raised while talking to the Twilio platform."""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base error; ``status`` and ``body`` are what the caller gets back."""

    def __init__(
        self, message: str, status: int | None = None, body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body if body is not None else {"status": status, "message": message}


class UpstreamTransportError(BridgeError):
    """The request never produced an HTTP response."""


class UpstreamDecodeError(BridgeError):
    """The platform answered with a body that is not JSON."""


class UpstreamBusinessError(BridgeError):
    """The platform rejected the request with a non-2xx status."""


class ConfigError(Exception):
    """Required configuration is missing."""
