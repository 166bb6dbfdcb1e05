# src/buildcache/logging/context.py - v1
"""Contextual logging support: attach command, run_id and unit to log records."""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

# Context variables for structured logging, set per command invocation.
_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_unit: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "unit", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    command: str | None = None
    run_id: str | None = None
    unit: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        command=_command.get(),
        run_id=_run_id.get(),
        unit=_unit.get(),
    )


def generate_run_id(timestamp: datetime | None = None) -> str:
    """Generate a run_id: yyyymmdd_hhmm_{uuid4_short}."""
    ts = timestamp or datetime.now(timezone.utc)
    short_uuid = uuid.uuid4().hex[:5]
    return f"{ts.strftime('%Y%m%d_%H%M')}_{short_uuid}"


def set_command_context(command: str, run_id: str) -> None:
    """Set command-level context (called once per invocation)."""
    _command.set(command)
    _run_id.set(run_id)


def set_unit_context(unit: str | None) -> None:
    """Set the unit currently being processed."""
    _unit.set(unit)


@contextmanager
def unit_context(unit: str) -> Iterator[None]:
    """Scope the unit context to a block, restoring the previous value."""
    token = _unit.set(unit)
    try:
        yield
    finally:
        _unit.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _command.set(None)
    _run_id.set(None)
    _unit.set(None)
