"""Shared test fixtures for flex-sms-bridge."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest

from flexsms.config import BridgeConfig

FROM_NUMBER = "+15551230000"
TO_NAME = "Jane"
TO_NUMBER = "+15559876543"


def make_event(**kwargs: Any) -> dict[str, Any]:
    """Factory for a valid inbound event with sensible defaults."""
    defaults: dict[str, Any] = {
        "fromNumber": FROM_NUMBER,
        "toName": TO_NAME,
        "toNumber": TO_NUMBER,
    }
    defaults.update(kwargs)
    return defaults


def make_flow(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {
        "sid": "FO123",
        "chat_service_sid": "IS456",
        "contact_identity": FROM_NUMBER,
        "integration_type": "task",
    }
    defaults.update(kwargs)
    return defaults


class FakeTwilio:
    """Answers Flex and Proxy requests through an httpx.MockTransport.

    Each endpoint response is a ``(status, payload)`` pair; a ``bytes``
    payload is sent raw. Names listed in ``connect_errors`` raise
    ``httpx.ConnectError`` instead.
    """

    def __init__(self) -> None:
        self.flows: tuple[int, Any] = (200, {"flex_flows": [make_flow()]})
        self.channel: tuple[int, Any] = (201, {"sid": "CH789"})
        self.session: tuple[int, Any] = (201, {"sid": "KC000"})
        self.connect_errors: set[str] = set()
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/FlexFlows"):
            name = "flows"
        elif path.endswith("/Channels"):
            name = "channel"
        elif path.endswith("/Sessions"):
            name = "session"
        else:
            return httpx.Response(404, json={"status": 404, "message": "not found"})

        if name in self.connect_errors:
            raise httpx.ConnectError("connection refused", request=request)
        status, payload = getattr(self, name)
        if isinstance(payload, bytes):
            return httpx.Response(status, content=payload)
        return httpx.Response(
            status,
            content=json.dumps(payload).encode(),
            headers={"content-type": "application/json"},
        )

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def form(self, suffix: str) -> dict[str, str]:
        """Form fields of the last request whose path ends with ``suffix``."""
        for request in reversed(self.requests):
            if request.url.path.endswith(suffix):
                return dict(parse_qsl(request.content.decode()))
        raise AssertionError(f"no request to {suffix}")


@pytest.fixture
def fake_twilio() -> FakeTwilio:
    return FakeTwilio()


@pytest.fixture
def bridge_config() -> BridgeConfig:
    return BridgeConfig(
        account_sid="ACtest",
        auth_token="secret-token",
        proxy_service_sid="KS999",
    )
