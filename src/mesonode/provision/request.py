# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/provision/request.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from mesonode.errors import InputError, MissingHostIp, MissingRole
from mesonode.roles.models import RoleSet
from mesonode.system.distro import Distro, parse_distro
from mesonode.topology.models import EnsembleTopology, NodeIdentity
from mesonode.topology.resolver import self_member_id, split_peers, validate_and_build, validate_ipv4

_HOSTNAME = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9.-]*[A-Za-z0-9])?$")


@dataclass(frozen=True)
class ProvisioningRequest:
    """Everything one run needs, validated once and never mutated."""

    roles: RoleSet
    topology: EnsembleTopology
    node: NodeIdentity
    mesos_version: Optional[str] = None
    marathon_version: Optional[str] = None
    distro: Optional[Distro] = None     # None -> detect from /etc/os-release
    dry_run: bool = False

    @property
    def member_id(self) -> Optional[int]:
        """This host's ensemble id; only masters have one."""
        if not self.roles.master:
            return None
        return self_member_id(self.topology, self.node.ip)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_request(
    roles: Sequence[str],
    *,
    masters: Optional[str] = None,
    ip: Optional[str] = None,
    hostname: Optional[str] = None,
    mesos: Optional[str] = None,
    marathon: Optional[str] = None,
    distro: Optional[str] = None,
    dry_run: bool = False,
) -> ProvisioningRequest:
    """
    Validate CLI input into a ProvisioningRequest.

    Every input error surfaces here, before a package is installed or a
    file is touched: bad roles, bad or even-count --masters, a master
    missing --ip or absent from --masters, a bad hostname or distro.
    """
    if not roles:
        raise MissingRole()
    role_set = RoleSet.parse(roles)

    topology = validate_and_build(split_peers(masters))

    ip = _clean(ip)
    if ip is not None:
        ip = validate_ipv4(ip)

    hostname = _clean(hostname)
    if hostname is not None and not _HOSTNAME.match(hostname):
        raise InputError(f"Invalid hostname: {hostname!r}")

    distro_override = parse_distro(distro) if _clean(distro) else None

    request = ProvisioningRequest(
        roles=role_set,
        topology=topology,
        node=NodeIdentity(ip=ip, hostname=hostname),
        mesos_version=_clean(mesos),
        marathon_version=_clean(marathon),
        distro=distro_override,
        dry_run=dry_run,
    )

    if role_set.master and not topology.is_single_node:
        if ip is None:
            raise MissingHostIp()
        # raises HostNotInTopology before anything is written
        self_member_id(topology, ip)

    return request
