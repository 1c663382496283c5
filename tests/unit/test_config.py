"""Tests for environment-based configuration."""

from __future__ import annotations

import pytest

from flexsms.config import DEFAULT_FLEX_API_BASE, DEFAULT_PROXY_API_BASE, BridgeConfig
from flexsms.errors import ConfigError


@pytest.fixture
def twilio_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACCOUNT_SID", "AC1")
    monkeypatch.setenv("AUTH_TOKEN", "tok")
    monkeypatch.setenv("TWILIO_PROXY_SERVICE_SID", "KS1")
    for name in ("FLEX_API_BASE", "PROXY_API_BASE", "AUDIT_LOG_PATH"):
        monkeypatch.delenv(name, raising=False)


def test_from_env_reads_credentials(twilio_env: None) -> None:
    config = BridgeConfig.from_env()
    assert config.account_sid == "AC1"
    assert config.auth_token == "tok"
    assert config.proxy_service_sid == "KS1"
    assert config.flex_api_base == DEFAULT_FLEX_API_BASE
    assert config.proxy_api_base == DEFAULT_PROXY_API_BASE
    assert config.audit_log_path is None


def test_from_env_overrides(twilio_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEX_API_BASE", "http://flex.local/v1")
    monkeypatch.setenv("AUDIT_LOG_PATH", "/tmp/audit.jsonl")
    config = BridgeConfig.from_env()
    assert config.flex_api_base == "http://flex.local/v1"
    assert config.audit_log_path == "/tmp/audit.jsonl"


def test_missing_variables_are_listed(
    twilio_env: None, monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("AUTH_TOKEN")
    monkeypatch.setenv("TWILIO_PROXY_SERVICE_SID", "")
    with pytest.raises(ConfigError, match="AUTH_TOKEN, TWILIO_PROXY_SERVICE_SID"):
        BridgeConfig.from_env()
