# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/observers/sinks.py
from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from .events import (
    BaseEvent,
    ConfigWritten,
    PackageInstalled,
    PackageResolved,
    PlanComputed,
    PlanFailed,
    ProvisionSummary,
    ServiceActionApplied,
    ServiceActionFailedEvent,
)

_HIDDEN = ("ts", "run_id", "env", "context")


def _fields(event: BaseEvent) -> str:
    return " ".join(f"{k}={v}" for k, v in event.dict().items() if k not in _HIDDEN)


def describe(event: BaseEvent) -> str:
    """One human line per event."""
    if isinstance(event, PlanComputed):
        return f"plan for {'+'.join(event.roles)}: {len(event.order)} steps"
    if isinstance(event, PackageResolved):
        return f"{event.package}: {event.requested or 'latest'} -> {event.version or 'latest'}"
    if isinstance(event, PackageInstalled):
        return f"installed {event.package} {event.version or '(latest)'}"
    if isinstance(event, ConfigWritten):
        return f"{event.target}: {event.path}" + ("" if event.changed else " (unchanged)")
    if isinstance(event, ServiceActionApplied):
        return f"{event.unit}: {event.state}"
    if isinstance(event, ServiceActionFailedEvent):
        return f"{event.unit}: {event.state} FAILED: {event.error}"
    if isinstance(event, PlanFailed):
        return f"aborted: {event.error}"
    if isinstance(event, ProvisionSummary):
        mode = " (dry-run)" if event.dry_run else ""
        return f"done{mode}: {event.applied} applied, {event.failed} failed"
    return f"{event.__class__.__name__} {_fields(event)}"


class ConsoleObserver:
    def notify(self, event: BaseEvent) -> None:
        failed = isinstance(event, (PlanFailed, ServiceActionFailedEvent))
        typer.secho(
            f"[{event.ts}] {describe(event)}",
            fg=typer.colors.RED if failed else None,
            err=failed,
        )


class LoggerObserver:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        level = logging.ERROR if isinstance(event, (PlanFailed, ServiceActionFailedEvent)) else logging.DEBUG
        self.logger.log(level, "[EVENT] %s: %s", event.__class__.__name__, _fields(event))


class JsonFileObserver:
    """Appends one JSON object per event (jsonl) for later auditing."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def notify(self, event: BaseEvent) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps({"type": event.__class__.__name__, **event.dict()}, default=str))
            f.write("\n")
