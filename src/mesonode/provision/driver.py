# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/provision/driver.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from mesonode.backends.interface import PackageBackend
from mesonode.config.models import FamilySettings, ProvisionSettings
from mesonode.errors import ProvisionError, ServiceActionFailed
from mesonode.observers.dispatcher import EventBus
from mesonode.observers.events import (
    ConfigWritten,
    PackageInstalled,
    PackageResolved,
    PlanComputed,
    PlanFailed,
    ProvisionSummary,
    ServiceActionApplied,
    ServiceActionFailedEvent,
    new_ctx,
)
from mesonode.roles.models import (
    Action,
    ConfigTarget,
    ConfigureAction,
    PlanContext,
    ServiceAction,
    ServiceState,
)
from mesonode.roles.state_machine import plan_actions
from mesonode.system.files import AtomicFileWriter
from mesonode.topology.resolver import connection_string, quorum_size, zoo_cfg_lines
from mesonode.topology.zoo_cfg import merge_zoo_cfg, render_base
from mesonode.versioning.catalog import PackageRequest, ResolvedPackageVersion, resolve_request

from .request import ProvisioningRequest

log = logging.getLogger("mesonode")


def render_config(
    target: ConfigTarget,
    *,
    request: ProvisioningRequest,
    settings: ProvisionSettings,
    family: FamilySettings,
    existing: Optional[str] = None,
) -> str:
    """
    Content for one configuration artifact.

    Pure: the same request, settings and existing file always give the
    same bytes, so a rerun rewrites nothing.
    """
    ens = settings.ensemble
    topology = request.topology

    if target is ConfigTarget.CONNECTION_STRING:
        return connection_string(topology, port=ens.client_port, chroot=ens.chroot) + "\n"
    if target is ConfigTarget.ENSEMBLE_MYID:
        return f"{request.member_id}\n"
    if target is ConfigTarget.MASTER_QUORUM:
        return f"{quorum_size(topology)}\n"
    if target is ConfigTarget.ENSEMBLE_PEERS:
        base = render_base(
            data_dir=str(family.paths.ensemble_data_dir), client_port=ens.client_port
        )
        lines = zoo_cfg_lines(topology, peer_port=ens.peer_port, leader_port=ens.leader_port)
        return merge_zoo_cfg(existing, lines, base=base)
    if target in (
        ConfigTarget.MASTER_HOSTNAME,
        ConfigTarget.AGENT_HOSTNAME,
        ConfigTarget.ORCHESTRATOR_HOSTNAME,
    ):
        return f"{request.node.hostname}\n"
    raise ValueError(f"no renderer for {target}")


@dataclass
class ProvisionReport:
    plan: Tuple[Action, ...] = ()
    resolved: List[ResolvedPackageVersion] = field(default_factory=list)
    applied: List[str] = field(default_factory=list)


class ProvisioningDriver:
    """
    Runs one provisioning pass:

      1. compute the action plan (pure)
      2. resolve package versions against the backend catalog
      3. install packages
      4. apply configure/service actions in plan order

    Steps 2 and 3 finish before any file or service is touched. A failing
    service action stops the run; earlier actions are not rolled back.
    """

    def __init__(
        self,
        request: ProvisioningRequest,
        backend: PackageBackend,
        *,
        settings: ProvisionSettings,
        writer: AtomicFileWriter,
        bus: Optional[EventBus] = None,
        run_id: Optional[str] = None,
    ):
        self.request = request
        self.backend = backend
        self.settings = settings
        self.family = settings.family(backend.family)
        self.writer = writer
        self.bus = bus or EventBus()
        self.run_id = run_id
        self._context = str(request.distro) if request.distro else backend.family

    # ------------------ events ------------------

    def _emit(self, cls, **fields) -> None:
        self.bus.emit(cls(**new_ctx(self.settings.environment, self._context, self.run_id), **fields))

    # ------------------ steps ------------------

    def plan(self) -> Tuple[Action, ...]:
        ctx = PlanContext(
            ensemble_bundled=self.backend.ensemble_bundled,
            has_hostname=self.request.node.hostname is not None,
        )
        return plan_actions(self.request.roles, ctx)

    def package_requests(self) -> List[PackageRequest]:
        names = self.settings.packages
        reqs = [PackageRequest(names.scheduler, self.request.mesos_version)]
        if self.request.roles.master:
            reqs.append(PackageRequest(names.orchestrator, self.request.marathon_version))
        return reqs

    def resolve_packages(self) -> List[ResolvedPackageVersion]:
        resolved = []
        for req in self.package_requests():
            available = self.backend.list_available_versions(req.name) if req.version else []
            rv = resolve_request(req, available)
            self._emit(PackageResolved, package=rv.name, requested=req.version, version=rv.version)
            resolved.append(rv)
        return resolved

    def install_packages(self, resolved: List[ResolvedPackageVersion]) -> None:
        for rv in resolved:
            if rv.is_latest:
                self.backend.install_latest(rv.name)
            else:
                self.backend.install_exact(rv.name, rv.version)
            self._emit(PackageInstalled, package=rv.name, version=rv.version)

        ensemble_pkg = self.family.ensemble_package
        if self.request.roles.master and ensemble_pkg and not self.backend.ensemble_bundled:
            self.backend.install_latest(ensemble_pkg)
            self._emit(PackageInstalled, package=ensemble_pkg, version=None)

    def configure(self, target: ConfigTarget) -> bool:
        path = self.family.paths.for_target(target)
        try:
            existing = self.writer.read(path) if target is ConfigTarget.ENSEMBLE_PEERS else None
            content = render_config(
                target,
                request=self.request,
                settings=self.settings,
                family=self.family,
                existing=existing,
            )
            changed = self.writer.write(path, content)
        except (OSError, UnicodeDecodeError) as exc:
            raise ProvisionError(f"updating {path} failed: {exc}") from exc
        self._emit(ConfigWritten, target=target.value, path=str(path), changed=changed)
        return changed

    def apply_service_action(self, action: ServiceAction) -> None:
        unit = self.settings.services.for_service(action.service)
        try:
            if action.state is ServiceState.ENABLED_RUNNING:
                self.backend.enable_service(unit)
                if not self.backend.is_service_running(unit):
                    self.backend.start_service(unit)
            elif action.state is ServiceState.DISABLED_STOPPED:
                self.backend.disable_service(unit)
            elif action.state is ServiceState.RESTARTED:
                # a role service must also come back after a reboot
                self.backend.enable_service(unit)
                self.backend.restart_service(unit)
        except (ProvisionError, OSError, UnicodeDecodeError) as exc:
            self._emit(
                ServiceActionFailedEvent,
                service=action.service.value,
                unit=unit,
                state=action.state.value,
                error=str(exc),
            )
            raise ServiceActionFailed(unit, action.state.value, exc) from exc

        self._emit(ServiceActionApplied, service=action.service.value, unit=unit, state=action.state.value)

    # ------------------ run ------------------

    def run(self) -> ProvisionReport:
        report = ProvisionReport(plan=self.plan())
        self._emit(
            PlanComputed,
            roles=self.request.roles.names(),
            order=[a.describe() for a in report.plan],
        )

        try:
            self.backend.refresh_catalog()
            report.resolved = self.resolve_packages()
            self.install_packages(report.resolved)
        except ProvisionError as exc:
            self._emit(PlanFailed, error=str(exc))
            raise

        failed = 0
        try:
            for action in report.plan:
                if isinstance(action, ConfigureAction):
                    self.configure(action.target)
                else:
                    self.apply_service_action(action)
                report.applied.append(action.describe())
        except Exception:
            failed = 1
            raise
        finally:
            self._emit(
                ProvisionSummary,
                roles=self.request.roles.names(),
                applied=len(report.applied),
                failed=failed,
                dry_run=self.request.dry_run,
            )
        return report
