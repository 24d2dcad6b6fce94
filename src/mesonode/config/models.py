# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/config/models.py

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from mesonode.roles.models import ConfigTarget, Service


class EnsembleSettings(BaseModel):
    client_port: int = 2181
    peer_port: int = 2888
    leader_port: int = 3888
    chroot: str = "/mesos"

    @field_validator("chroot")
    @classmethod
    def _chroot_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("chroot must start with '/'")
        return v


class ServiceNames(BaseModel):
    ensemble: str = "zookeeper"
    master: str = "mesos-master"
    agent: str = "mesos-slave"
    orchestrator: str = "marathon"

    def for_service(self, service: Service) -> str:
        return getattr(self, service.value)


class PackageNames(BaseModel):
    scheduler: str = "mesos"
    orchestrator: str = "marathon"


class PathTable(BaseModel):
    """Where each configuration artifact lives on one OS family."""

    connection_string: Path = Path("/etc/mesos/zk")
    master_quorum: Path = Path("/etc/mesos-master/quorum")
    ensemble_myid: Path = Path("/etc/zookeeper/conf/myid")
    ensemble_peers: Path = Path("/etc/zookeeper/conf/zoo.cfg")
    master_hostname: Path = Path("/etc/mesos-master/hostname")
    agent_hostname: Path = Path("/etc/mesos-slave/hostname")
    orchestrator_hostname: Path = Path("/etc/marathon/conf/hostname")
    ensemble_data_dir: Path = Path("/var/lib/zookeeper")

    def for_target(self, target: ConfigTarget) -> Path:
        return getattr(self, target.value.replace("-", "_"))


class FamilySettings(BaseModel):
    paths: PathTable = Field(default_factory=PathTable)
    # Installed explicitly on masters when the scheduler packages do not
    # pull the ensemble in.
    ensemble_package: Optional[str] = None


def _default_families() -> Dict[str, FamilySettings]:
    return {
        "apt": FamilySettings(),
        "yum": FamilySettings(
            paths=PathTable(ensemble_myid=Path("/var/lib/zookeeper/myid")),
            ensemble_package="mesosphere-zookeeper",
        ),
    }


class ProvisionSettings(BaseModel):
    ensemble: EnsembleSettings = Field(default_factory=EnsembleSettings)
    services: ServiceNames = Field(default_factory=ServiceNames)
    packages: PackageNames = Field(default_factory=PackageNames)
    families: Dict[str, FamilySettings] = Field(default_factory=_default_families)
    upstart_dir: Path = Path("/etc/init")
    command_timeout: int = 600
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".mesonode" / "logs")
    environment: str = "default"

    def family(self, name: str) -> FamilySettings:
        return self.families.get(name) or FamilySettings()
