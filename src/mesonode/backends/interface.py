# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
from typing import List, Protocol


class PackageBackend(Protocol):
    """
    Everything the driver needs from the host's package and init system.
    One implementation per OS family, picked once at startup.
    """

    family: str
    ensemble_bundled: bool

    def refresh_catalog(self) -> None: ...

    def list_available_versions(self, package: str) -> List[str]:
        """Versions installable for `package`, oldest first."""
        ...

    def install_exact(self, package: str, version: str) -> None: ...

    def install_latest(self, package: str) -> None: ...

    def is_service_running(self, service: str) -> bool: ...

    def start_service(self, service: str) -> None: ...

    def stop_service(self, service: str) -> None: ...

    def restart_service(self, service: str) -> None: ...

    def enable_service(self, service: str) -> None: ...

    def disable_service(self, service: str) -> None:
        """
        Stop the service if it is running and keep it from starting on
        boot. Must survive a reboot.
        """
        ...
