# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/backends/base.py
from __future__ import annotations

import logging
from typing import List

from mesonode.execution.runner import CommandRunner
from .services import ServiceManager

log = logging.getLogger("mesonode")


class BaseBackend:
    """
    Shared half of a package backend: service calls are delegated to the
    init-system strategy, package calls are left to the family subclass.
    """

    family = "base"
    ensemble_bundled = False

    def __init__(self, runner: CommandRunner, services: ServiceManager):
        self.runner = runner
        self.services = services

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(init={self.services.name})"

    # ------------------ packages ------------------

    def refresh_catalog(self) -> None:
        raise NotImplementedError

    def list_available_versions(self, package: str) -> List[str]:
        raise NotImplementedError

    def install_exact(self, package: str, version: str) -> None:
        raise NotImplementedError

    def install_latest(self, package: str) -> None:
        raise NotImplementedError

    # ------------------ services ------------------

    def is_service_running(self, service: str) -> bool:
        return self.services.is_running(service)

    def start_service(self, service: str) -> None:
        self.services.start(service)

    def stop_service(self, service: str) -> None:
        self.services.stop(service)

    def restart_service(self, service: str) -> None:
        self.services.restart(service)

    def enable_service(self, service: str) -> None:
        self.services.enable(service)

    def disable_service(self, service: str) -> None:
        self.services.disable(service)


def dedupe(versions: List[str]) -> List[str]:
    seen = set()
    out = []
    for v in versions:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out
