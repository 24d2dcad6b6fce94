# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/backends/services.py
from __future__ import annotations

import logging
from pathlib import Path

from mesonode.execution.runner import CommandRunner
from mesonode.system.files import AtomicFileWriter

log = logging.getLogger("mesonode")


class ServiceManager:
    """
    Init-system mechanics. Subclasses provide the commands; the
    stop-then-mark-manual protocol for disabling lives here.
    """

    name = "base"

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    # ------------------ init-specific ------------------

    def is_running(self, service: str) -> bool:
        raise NotImplementedError

    def start(self, service: str) -> None:
        raise NotImplementedError

    def stop(self, service: str) -> None:
        raise NotImplementedError

    def restart(self, service: str) -> None:
        raise NotImplementedError

    def mark_auto(self, service: str) -> None:
        raise NotImplementedError

    def mark_manual(self, service: str) -> None:
        raise NotImplementedError

    # ------------------ shared protocol ------------------

    def enable(self, service: str) -> None:
        self.mark_auto(service)

    def disable(self, service: str) -> None:
        if self.is_running(service):
            log.info("stopping %s", service)
            self.stop(service)
        else:
            log.debug("%s not running, nothing to stop", service)
        self.mark_manual(service)


class SystemdServices(ServiceManager):
    name = "systemd"

    def is_running(self, service: str) -> bool:
        cp = self.runner.run(
            ["systemctl", "is-active", "--quiet", service], check=False, mutating=False
        )
        return cp.returncode == 0

    def start(self, service: str) -> None:
        self.runner.run(["systemctl", "start", service])

    def stop(self, service: str) -> None:
        self.runner.run(["systemctl", "stop", service])

    def restart(self, service: str) -> None:
        self.runner.run(["systemctl", "restart", service])

    def mark_auto(self, service: str) -> None:
        self.runner.run(["systemctl", "enable", service])

    def mark_manual(self, service: str) -> None:
        self.runner.run(["systemctl", "disable", service])


class UpstartServices(ServiceManager):
    """Upstart jobs; "manual" in /etc/init/<job>.override disables autostart."""

    name = "upstart"

    def __init__(self, runner: CommandRunner, writer: AtomicFileWriter, override_dir: Path = Path("/etc/init")):
        super().__init__(runner)
        self.writer = writer
        self.override_dir = Path(override_dir)

    def _override(self, service: str) -> Path:
        return self.override_dir / f"{service}.override"

    def is_running(self, service: str) -> bool:
        cp = self.runner.run(["status", service], check=False, mutating=False)
        return cp.returncode == 0 and "start/running" in (cp.stdout or "")

    def start(self, service: str) -> None:
        self.runner.run(["start", service])

    def stop(self, service: str) -> None:
        self.runner.run(["stop", service])

    def restart(self, service: str) -> None:
        # upstart's `restart` refuses a stopped job
        if self.is_running(service):
            self.stop(service)
        self.start(service)

    def mark_auto(self, service: str) -> None:
        self.writer.remove(self._override(service))

    def mark_manual(self, service: str) -> None:
        self.writer.write(self._override(service), "manual\n")


class SysvServices(ServiceManager):
    """SysV init scripts; runlevel links handled by chkconfig or update-rc.d."""

    name = "sysv"

    def __init__(self, runner: CommandRunner, family: str):
        super().__init__(runner)
        self.family = family

    def is_running(self, service: str) -> bool:
        cp = self.runner.run(["service", service, "status"], check=False, mutating=False)
        return cp.returncode == 0

    def start(self, service: str) -> None:
        self.runner.run(["service", service, "start"])

    def stop(self, service: str) -> None:
        self.runner.run(["service", service, "stop"])

    def restart(self, service: str) -> None:
        self.runner.run(["service", service, "restart"])

    def mark_auto(self, service: str) -> None:
        if self.family == "yum":
            self.runner.run(["chkconfig", service, "on"])
        else:
            self.runner.run(["update-rc.d", service, "defaults"])

    def mark_manual(self, service: str) -> None:
        if self.family == "yum":
            self.runner.run(["chkconfig", service, "off"])
        else:
            self.runner.run(["update-rc.d", "-f", service, "remove"])
