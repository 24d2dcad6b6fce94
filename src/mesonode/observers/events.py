# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single provisioning run
    env: str          # settings.environment
    context: Optional[str]  # distro of the host being provisioned

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(env: str, context: Optional[str], run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "env": env,
        "context": context,
    }


# ---------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PlanComputed(BaseEvent):
    roles: List[str]
    order: List[str]

@dataclass(frozen=True)
class PlanFailed(BaseEvent):
    error: str


# ---------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PackageResolved(BaseEvent):
    package: str
    requested: Optional[str]
    version: Optional[str]      # None -> latest

@dataclass(frozen=True)
class PackageInstalled(BaseEvent):
    package: str
    version: Optional[str]


# ---------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ConfigWritten(BaseEvent):
    target: str
    path: str
    changed: bool


# ---------------------------------------------------------------------
# Service lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ServiceActionApplied(BaseEvent):
    service: str
    unit: str
    state: str

@dataclass(frozen=True)
class ServiceActionFailedEvent(BaseEvent):
    service: str
    unit: str
    state: str
    error: str


# ---------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ProvisionSummary(BaseEvent):
    roles: List[str]
    applied: int
    failed: int
    dry_run: bool
