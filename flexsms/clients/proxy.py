"""Proxy API client: number-masking session creation."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from flexsms.clients.base import TwilioRestClient
from flexsms.config import DEFAULT_PROXY_API_BASE
from flexsms.errors import UpstreamBusinessError
from flexsms.models import ProxyParticipant

logger = logging.getLogger(__name__)

SESSION_MODE = "message-only"


class ProxyClient(TwilioRestClient):
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        service_sid: str,
        api_base: str = DEFAULT_PROXY_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(account_sid, auth_token, transport=transport)
        self._sessions_url = f"{api_base.rstrip('/')}/Services/{service_sid}/Sessions"

    @staticmethod
    def build_participants(
        chat_channel_sid: str, to_number: str, to_name: str, from_number: str,
    ) -> list[ProxyParticipant]:
        """The SMS recipient and the chat channel, both behind ``from_number``."""
        return [
            ProxyParticipant(
                identifier=to_number, proxy_identifier=from_number, friendly_name=to_name,
            ),
            ProxyParticipant(
                identifier=chat_channel_sid, proxy_identifier=from_number, friendly_name=to_name,
            ),
        ]

    async def create_session(
        self,
        chat_channel_sid: str,
        to_number: str,
        to_name: str,
        from_number: str,
    ) -> dict[str, Any] | None:
        """Create a message-only session named after the chat channel.

        Raises:
            UpstreamBusinessError: The Proxy API answered with a non-2xx status.
        """
        participants = self.build_participants(chat_channel_sid, to_number, to_name, from_number)
        data = {
            "UniqueName": chat_channel_sid,
            "Mode": SESSION_MODE,
            "Participants": json.dumps([p.model_dump(by_alias=True) for p in participants]),
        }
        status, payload = await self._request("POST", self._sessions_url, data=data)
        if status >= 400:
            body = payload if isinstance(payload, dict) else {"status": status}
            message = str(body.get("message", "Proxy session creation failed"))
            logger.error("Error creating proxy session: %s %s", status, message)
            raise UpstreamBusinessError(message, status=status, body=body)
        return payload if isinstance(payload, dict) else None
