"""SMS-to-chat bridge pipeline.

Stages, each depending on the one before:
1. Validate the inbound event
2. Resolve the Flex Flow for the sender number
3. Create a task-backed chat channel on that flow
4. Create a Proxy session between the recipient and the channel
5. Merge channel and session into the response

Any failure ends the run with an error response. Nothing is retried and
nothing already created is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from flexsms.clients import FlexClient, ProxyClient
from flexsms.errors import BridgeError
from flexsms.models import AuditEvent, AuditEventType, BridgeRequest, BridgeResponse, RiskLevel
from flexsms.validator import REQUIRED_FIELDS, validate_event

if TYPE_CHECKING:
    import httpx

    from flexsms.audit.logger import AuditLogger
    from flexsms.config import BridgeConfig

logger = logging.getLogger(__name__)

FLOW_NOT_FOUND_MESSAGE = "Unable to find matching Flex Flow"
CHANNEL_FAILED_MESSAGE = "Failed to create chat channel"
SESSION_FAILED_MESSAGE = "Failed to create proxy session"

# Client bookkeeping fields never returned to the caller
_SESSION_INTERNAL_FIELDS = frozenset({"_version", "_solution"})


class SmsChatBridge:
    """Runs one bridge invocation per ``start`` call."""

    def __init__(
        self,
        flex_client: FlexClient,
        proxy_client: ProxyClient,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._flex = flex_client
        self._proxy = proxy_client
        self._audit = audit_logger

    @classmethod
    def from_config(
        cls,
        config: BridgeConfig,
        audit_logger: AuditLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SmsChatBridge:
        """Wire both platform clients from one credential bundle."""
        flex = FlexClient(
            config.account_sid, config.auth_token,
            api_base=config.flex_api_base, transport=transport,
        )
        proxy = ProxyClient(
            config.account_sid, config.auth_token, config.proxy_service_sid,
            api_base=config.proxy_api_base, transport=transport,
        )
        return cls(flex, proxy, audit_logger=audit_logger)

    async def start(self, event: Mapping[str, Any]) -> BridgeResponse:
        logger.info("Received event with properties:")
        for key, value in event.items():
            logger.info("--%s: %s", key, value)

        # Stage 1: Validate
        check = validate_event(event)
        if not check.success:
            logger.info("Event property check failed. %s", check.message)
            self._record(
                AuditEventType.BRIDGE_REJECTED, "validate", "rejected", RiskLevel.LOW,
                {"message": check.message},
            )
            return BridgeResponse(400, {"status": 400, "message": check.message})
        request = BridgeRequest.model_validate(
            {name: str(event[name]) for name in REQUIRED_FIELDS},
        )

        # Stage 2: Resolve flow
        try:
            flow = await self._flex.get_flex_flow(request.from_number)
        except BridgeError as exc:
            return self._upstream_failure("get_flex_flow", exc)
        if flow is None or not flow.sid:
            self._record(
                AuditEventType.FLOW_NOT_FOUND, "get_flex_flow", "failure", RiskLevel.MEDIUM,
                {"from_number": request.from_number},
            )
            return BridgeResponse(500, {"message": FLOW_NOT_FOUND_MESSAGE})
        logger.info("Matching flow chat service SID: %s", flow.chat_service_sid)
        logger.info("Matching flex flow sid: %s", flow.sid)

        identity = str(uuid.uuid4())

        # Stage 3: Create chat channel
        try:
            channel = await self._flex.create_chat_channel(
                flow.sid, identity, request.to_number, request.to_name, request.from_number,
            )
        except BridgeError as exc:
            return self._upstream_failure("create_chat_channel", exc)
        if channel is None:
            return BridgeResponse(500, {"message": CHANNEL_FAILED_MESSAGE})
        if not channel.get("sid"):
            return self._platform_rejection("create_chat_channel", channel)
        logger.info("Chat channel created:")
        for key, value in channel.items():
            logger.info("%s: %s", key, value)
        self._record(
            AuditEventType.CHANNEL_CREATED, "create_chat_channel", "success", RiskLevel.INFO,
            {"channel_sid": channel["sid"], "flex_flow_sid": flow.sid},
        )
        body: dict[str, Any] = {"chatChannel": {"identity": identity, **channel}}

        # Stage 4: Create proxy session
        try:
            session = await self._proxy.create_session(
                channel["sid"], request.to_number, request.to_name, request.from_number,
            )
        except BridgeError as exc:
            return self._upstream_failure("create_session", exc)
        if session is None:
            return BridgeResponse(500, {"message": SESSION_FAILED_MESSAGE})
        if not session.get("sid"):
            return self._platform_rejection("create_session", session)
        logger.info("Proxy session created:")
        proxy_session: dict[str, Any] = {}
        for key, value in session.items():
            if key in _SESSION_INTERNAL_FIELDS:
                continue
            logger.info("%s: %s", key, value)
            proxy_session[key] = value
        self._record(
            AuditEventType.SESSION_CREATED, "create_session", "success", RiskLevel.INFO,
            {"session_sid": session["sid"], "channel_sid": channel["sid"]},
        )

        # Stage 5: Respond
        body["proxySession"] = proxy_session
        self._record(
            AuditEventType.BRIDGE_COMPLETED, "start", "success", RiskLevel.INFO,
            {
                "from_number": request.from_number,
                "to_number": request.to_number,
                "identity": identity,
            },
        )
        return BridgeResponse(200, body)

    def _upstream_failure(self, action: str, exc: BridgeError) -> BridgeResponse:
        """Surface the error body verbatim; a status-less error becomes a 500."""
        logger.error("%s failed: %s", action, exc.message)
        self._record(
            AuditEventType.UPSTREAM_ERROR, action, "failure", RiskLevel.HIGH,
            {"status": exc.status, "error": type(exc).__name__},
        )
        return BridgeResponse(exc.status if exc.status is not None else 500, exc.body)

    def _platform_rejection(self, action: str, payload: dict[str, Any]) -> BridgeResponse:
        status = payload.get("status")
        logger.error("%s returned no sid (status %s)", action, status)
        self._record(
            AuditEventType.UPSTREAM_ERROR, action, "failure", RiskLevel.HIGH,
            {"status": status},
        )
        return BridgeResponse(status if isinstance(status, int) else 500, payload)

    def _record(
        self,
        event_type: AuditEventType,
        action: str,
        result: str,
        risk_level: RiskLevel,
        details: dict[str, object],
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=event_type,
                action=action,
                result=result,
                risk_level=risk_level,
                details=details,
            ))
