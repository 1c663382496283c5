"""Flex API client: flow lookup and task-backed chat channel creation."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from flexsms.clients.base import TwilioRestClient
from flexsms.config import DEFAULT_FLEX_API_BASE
from flexsms.models import FlexFlow, TaskAttributes

logger = logging.getLogger(__name__)

CHAT_FRIENDLY_NAME_PREFIX = "SMS"


class FlexClient(TwilioRestClient):
    """Calls https://flex-api.twilio.com/v1 (or a configured base URL)."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        api_base: str = DEFAULT_FLEX_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(account_sid, auth_token, transport=transport)
        self._api_base = api_base.rstrip("/")

    async def list_flex_flows(self) -> list[FlexFlow]:
        """Return the first page of configured Flex Flows.

        A response without a ``flex_flows`` collection (including error
        bodies) yields an empty list. Entries that do not parse are skipped.
        """
        _, payload = await self._request("GET", f"{self._api_base}/FlexFlows")
        entries = payload.get("flex_flows") if isinstance(payload, dict) else None
        if not entries:
            return []
        flows: list[FlexFlow] = []
        for entry in entries:
            try:
                flows.append(FlexFlow.model_validate(entry))
            except ValidationError as exc:
                logger.warning("Skipping malformed Flex Flow entry: %s", exc)
        return flows

    async def get_flex_flow(self, from_number: str) -> FlexFlow | None:
        """Find the first task flow whose contact identity is ``from_number``."""
        logger.info(
            "Finding Flex Flow matching %s with integration_type of task", from_number,
        )
        flows = await self.list_flex_flows()
        if not flows:
            logger.error("No Flex flows returned from fetch request")
            return None
        for flow in flows:
            if flow.matches(from_number):
                return flow
        return None

    async def create_chat_channel(
        self,
        flex_flow_sid: str,
        identity: str,
        to_number: str,
        to_name: str,
        from_number: str,
    ) -> dict[str, Any] | None:
        """Create a chat channel with a task attached to it.

        The decoded body is returned whatever the HTTP status; an error body
        has no ``sid`` and carries the platform ``status`` instead.
        """
        task_attributes = TaskAttributes(
            to=to_number,
            name=to_name,
            from_number=from_number,
            target_worker_phone=from_number,
        )
        data = {
            "FlexFlowSid": flex_flow_sid,
            "Target": to_number,
            "Identity": identity,
            "ChatUserFriendlyName": to_name,
            "ChatFriendlyName": f"{CHAT_FRIENDLY_NAME_PREFIX}{to_number}",
            "TaskAttributes": task_attributes.model_dump_json(by_alias=True),
        }
        _, payload = await self._request("POST", f"{self._api_base}/Channels", data=data)
        return payload if isinstance(payload, dict) else None
