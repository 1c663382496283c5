"""Shared request plumbing for the Twilio REST clients."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from flexsms.errors import UpstreamDecodeError, UpstreamTransportError

logger = logging.getLogger(__name__)


class TwilioRestClient:
    """Issues one Basic-authenticated request per call; no retries."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._auth = httpx.BasicAuth(account_sid, auth_token)
        self._transport = transport

    async def _request(
        self, method: str, url: str, data: dict[str, str] | None = None,
    ) -> tuple[int, Any]:
        """Send the request and return ``(status_code, decoded_json)``.

        Raises:
            UpstreamTransportError: The request failed before a response arrived.
            UpstreamDecodeError: The response body is not valid JSON.
        """
        try:
            async with httpx.AsyncClient(auth=self._auth, transport=self._transport) as client:
                resp = await client.request(method, url, data=data)
        except httpx.TransportError as exc:
            logger.error("Error calling %s %s: %s", method, url, exc)
            raise UpstreamTransportError(f"Error calling {url}: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("Error converting %s response to JSON: %s", url, exc)
            raise UpstreamDecodeError(f"Invalid JSON from {url}") from exc
        return resp.status_code, payload
