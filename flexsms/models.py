"""Shared data models for flex-sms-bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class AuditEventType(str, Enum):
    BRIDGE_REJECTED = "bridge_rejected"
    FLOW_NOT_FOUND = "flow_not_found"
    UPSTREAM_ERROR = "upstream_error"
    CHANNEL_CREATED = "channel_created"
    SESSION_CREATED = "session_created"
    BRIDGE_COMPLETED = "bridge_completed"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Request Models ---


class BridgeRequest(BaseModel):
    """Validated inbound request to open an SMS-to-chat bridge."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_number: str = Field(alias="fromNumber")
    to_name: str = Field(alias="toName")
    to_number: str = Field(alias="toNumber")


# --- Platform Models ---


class FlexFlow(BaseModel):
    """One entry of the Flex Flows listing. Unknown fields are kept."""

    model_config = ConfigDict(frozen=True, extra="allow")

    sid: str | None = None
    chat_service_sid: str | None = None
    contact_identity: str | None = None
    integration_type: str | None = None

    def matches(self, from_number: str) -> bool:
        return self.contact_identity == from_number and self.integration_type == "task"


class TaskAttributes(BaseModel):
    """Attributes attached to the task that backs a new chat channel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: str
    direction: Literal["outbound"] = "outbound"
    name: str
    from_number: str = Field(alias="from")
    target_worker_phone: str = Field(alias="targetWorkerPhone")
    auto_answer: Literal[True] = Field(default=True, alias="autoAnswer")


class ProxyParticipant(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier: str = Field(alias="Identifier")
    proxy_identifier: str = Field(alias="ProxyIdentifier")
    friendly_name: str = Field(alias="FriendlyName")


# --- Response Models ---


@dataclass
class BridgeResponse:
    """Status and JSON body returned to the caller of the bridge."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    action: str
    result: str  # "success" | "failure" | "rejected"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
