# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/roles/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Union

from mesonode.errors import MissingRole


class Role(str, Enum):
    MASTER = "master"
    AGENT = "agent"


class Service(str, Enum):
    ENSEMBLE = "ensemble"           # zookeeper
    MASTER = "master"               # mesos-master
    AGENT = "agent"                 # mesos-slave
    ORCHESTRATOR = "orchestrator"   # marathon


class ServiceState(str, Enum):
    ENABLED_RUNNING = "enabled-running"
    DISABLED_STOPPED = "disabled-stopped"
    RESTARTED = "restarted"


class ConfigTarget(str, Enum):
    CONNECTION_STRING = "connection-string"
    ENSEMBLE_PEERS = "ensemble-peers"
    ENSEMBLE_MYID = "ensemble-myid"
    MASTER_QUORUM = "master-quorum"
    MASTER_HOSTNAME = "master-hostname"
    AGENT_HOSTNAME = "agent-hostname"
    ORCHESTRATOR_HOSTNAME = "orchestrator-hostname"


@dataclass(frozen=True)
class RoleSet:
    roles: FrozenSet[Role]

    def __post_init__(self):
        if not self.roles:
            raise MissingRole()

    @classmethod
    def parse(cls, tokens: Iterable[str]) -> "RoleSet":
        roles = set()
        for token in tokens:
            try:
                roles.add(Role(token.strip().lower()))
            except ValueError:
                raise MissingRole(
                    f"unknown role {token!r}; expected one or both of: master, agent"
                ) from None
        return cls(frozenset(roles))

    @property
    def master(self) -> bool:
        return Role.MASTER in self.roles

    @property
    def agent(self) -> bool:
        return Role.AGENT in self.roles

    def names(self) -> list[str]:
        return sorted(r.value for r in self.roles)


@dataclass(frozen=True)
class ServiceAction:
    service: Service
    state: ServiceState

    def describe(self) -> str:
        return f"{self.state.value} {self.service.value}"


@dataclass(frozen=True)
class ConfigureAction:
    target: ConfigTarget

    def describe(self) -> str:
        return f"configure {self.target.value}"


Action = Union[ConfigureAction, ServiceAction]


@dataclass(frozen=True)
class PlanContext:
    """
    Backend and topology facts the state machine needs.

    ensemble_bundled: the ensemble daemon ships with the scheduler packages
        on this OS family, so an agent-only host has to switch it off.
    """
    ensemble_bundled: bool = False
    has_hostname: bool = False
