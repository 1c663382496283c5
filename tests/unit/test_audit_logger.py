"""Tests for the audit logger."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from flexsms.audit.logger import AuditLogger
from flexsms.models import AuditEvent, AuditEventType, RiskLevel


def _make_event(**kwargs: object) -> AuditEvent:
    defaults: dict[str, object] = {
        "event_type": AuditEventType.CHANNEL_CREATED,
        "action": "create_chat_channel",
        "result": "success",
        "risk_level": RiskLevel.INFO,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)  # type: ignore[arg-type]


def test_log_appends_json_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(_make_event(details={"channel_sid": "CH1"}))

    lines = log_file.read_text().strip().split("\n")
    assert len(lines) == 1
    parsed = json.loads(lines[0])
    assert parsed["event_type"] == "channel_created"
    assert parsed["risk_level"] == "info"
    assert parsed["details"] == {"channel_sid": "CH1"}


def test_log_multiple_events_append(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))

    for i in range(3):
        logger.log(_make_event(action=f"action_{i}"))

    lines = log_file.read_text().strip().split("\n")
    assert [json.loads(line)["action"] for line in lines] == ["action_0", "action_1", "action_2"]


def test_creates_parent_directory(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "dir" / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(_make_event())
    assert log_file.exists()


def test_rotates_when_max_bytes_reached(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=1, backup_count=2)

    logger.log(_make_event(action="first"))
    logger.log(_make_event(action="second"))
    logger.log(_make_event(action="third"))

    assert json.loads(log_file.read_text())["action"] == "third"
    assert json.loads((tmp_path / "audit.jsonl.1").read_text())["action"] == "second"
    assert json.loads((tmp_path / "audit.jsonl.2").read_text())["action"] == "first"


def test_oldest_backup_dropped(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=1, backup_count=1)

    for action in ("a", "b", "c"):
        logger.log(_make_event(action=action))

    assert json.loads((tmp_path / "audit.jsonl.1").read_text())["action"] == "b"
    assert not (tmp_path / "audit.jsonl.2").exists()


def test_from_env_reads_rotation_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("AUDIT_LOG_MAX_BYTES", "2048")
    monkeypatch.setenv("AUDIT_LOG_BACKUP_COUNT", "3")
    logger = AuditLogger.from_env(str(tmp_path / "audit.jsonl"))
    assert logger._max_bytes == 2048
    assert logger._backup_count == 3
