"""Click CLI for running the bridge and inspecting Flex Flows."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from flexsms.audit.logger import AuditLogger
from flexsms.bridge import SmsChatBridge
from flexsms.clients import FlexClient
from flexsms.config import BridgeConfig
from flexsms.errors import BridgeError, ConfigError


def _load_config() -> BridgeConfig:
    try:
        return BridgeConfig.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--log-level", default="INFO", help="Python logging level.")
def cli(log_level: str) -> None:
    """Twilio Flex SMS-to-chat bridge CLI."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


@cli.command()
@click.option("--from-number", required=True, help="Flex number the SMS is sent from.")
@click.option("--to-name", required=True, help="Display name of the recipient.")
@click.option("--to-number", required=True, help="Recipient phone number.")
@click.option("--audit-log", default=None, help="Audit log file path.")
def start(from_number: str, to_name: str, to_number: str, audit_log: str | None) -> None:
    """Open a task-backed chat channel and proxy session for one recipient."""
    config = _load_config()
    log_path = audit_log or config.audit_log_path
    audit_logger = AuditLogger.from_env(log_path) if log_path else None
    bridge = SmsChatBridge.from_config(config, audit_logger=audit_logger)
    event = {"fromNumber": from_number, "toName": to_name, "toNumber": to_number}
    result = asyncio.run(bridge.start(event))
    click.echo(json.dumps(result.body, indent=2))
    if result.status_code >= 400:
        raise SystemExit(1)


@cli.command()
@click.option("--from-number", default=None, help="Only show flows the bridge would use.")
def flows(from_number: str | None) -> None:
    """List configured Flex Flows as JSON."""
    config = _load_config()
    client = FlexClient(config.account_sid, config.auth_token, api_base=config.flex_api_base)
    try:
        items = asyncio.run(client.list_flex_flows())
    except BridgeError as exc:
        raise click.ClickException(exc.message) from exc
    if from_number:
        items = [f for f in items if f.matches(from_number)]
    click.echo(json.dumps([f.model_dump() for f in items], indent=2))


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(host: str, port: int) -> None:
    """Serve the bridge over HTTP with uvicorn."""
    import uvicorn

    uvicorn.run("flexsms.app:create_app_from_env", factory=True, host=host, port=port)
