"""Inbound request validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS = ("fromNumber", "toName", "toNumber")


@dataclass(frozen=True)
class ValidationResult:
    success: bool
    message: str | None = None


def validate_event(event: Mapping[str, Any]) -> ValidationResult:
    """Check that every required field is present and non-empty."""
    for name in REQUIRED_FIELDS:
        if not event.get(name):
            return ValidationResult(success=False, message=f"Missing '{name}' in request body")
    return ValidationResult(success=True)
