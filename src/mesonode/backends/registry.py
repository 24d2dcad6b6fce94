# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/backends/registry.py
from __future__ import annotations

import logging

from mesonode.config.models import ProvisionSettings
from mesonode.errors import UnsupportedDistro
from mesonode.execution.runner import CommandRunner
from mesonode.system.distro import Distro
from mesonode.system.files import AtomicFileWriter

from .apt import AptBackend
from .base import BaseBackend
from .services import ServiceManager, SystemdServices, SysvServices, UpstartServices
from .yum import YumBackend

log = logging.getLogger("mesonode")

BACKENDS = {
    "apt": AptBackend,
    "yum": YumBackend,
}


def build_service_manager(
    distro: Distro,
    *,
    runner: CommandRunner,
    writer: AtomicFileWriter,
    settings: ProvisionSettings,
) -> ServiceManager:
    if distro.init == "systemd":
        return SystemdServices(runner)
    if distro.init == "upstart":
        return UpstartServices(runner, writer, override_dir=settings.upstart_dir)
    if distro.init == "sysv":
        return SysvServices(runner, family=distro.family)
    raise UnsupportedDistro(str(distro))


def select_backend(
    distro: Distro,
    *,
    runner: CommandRunner,
    writer: AtomicFileWriter,
    settings: ProvisionSettings,
) -> BaseBackend:
    """Pick the package backend for this host. Called once per run."""
    try:
        backend_cls = BACKENDS[distro.family]
    except KeyError:
        raise UnsupportedDistro(str(distro)) from None

    services = build_service_manager(distro, runner=runner, writer=writer, settings=settings)
    backend = backend_cls(runner, services)
    log.debug("distro %s -> %r", distro, backend)
    return backend
