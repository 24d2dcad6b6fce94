# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/topology/resolver.py
from __future__ import annotations

import ipaddress
from typing import Iterable, List, Optional

from mesonode.errors import EvenPeerCount, HostNotInTopology, InvalidAddress
from .models import EnsembleTopology

DEFAULT_CLIENT_PORT = 2181
DEFAULT_PEER_PORT = 2888
DEFAULT_LEADER_PORT = 3888
DEFAULT_CHROOT = "/mesos"


def validate_ipv4(value: str) -> str:
    """
    Return the address unchanged if it is a dotted-quad IPv4, else raise.
    """
    candidate = (value or "").strip()
    try:
        ipaddress.IPv4Address(candidate)
    except ValueError:
        raise InvalidAddress(value) from None
    return candidate


def split_peers(raw: Optional[str]) -> List[str]:
    """Split a --masters value; blank entries are dropped."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def validate_and_build(peers: Iterable[str]) -> EnsembleTopology:
    """
    Validate every peer, then the count.

    Raises InvalidAddress for the first bad entry and EvenPeerCount when
    the count is even and non-zero. Even ensembles are refused, not
    trimmed: an operator has to decide which host to drop.
    """
    validated = tuple(validate_ipv4(p) for p in peers)
    if validated and len(validated) % 2 == 0:
        raise EvenPeerCount(len(validated))
    return EnsembleTopology(peers=validated)


def member_id_of(topology: EnsembleTopology, self_ip: str) -> int:
    for member_id, ip in topology.members():
        if ip == self_ip:
            return member_id
    raise HostNotInTopology(self_ip, topology.peers)


def self_member_id(topology: EnsembleTopology, self_ip: Optional[str]) -> int:
    """Member id of this host; a single-node ensemble is always server 1."""
    if topology.is_single_node:
        return 1
    return member_id_of(topology, self_ip or "")


def quorum_size(topology: EnsembleTopology) -> int:
    size = max(len(topology), 1)
    return size // 2 + 1


def connection_string(
    topology: EnsembleTopology,
    port: int = DEFAULT_CLIENT_PORT,
    chroot: str = DEFAULT_CHROOT,
) -> str:
    hosts = topology.peers or ("localhost",)
    return "zk://" + ",".join(f"{h}:{port}" for h in hosts) + chroot


def zoo_cfg_lines(
    topology: EnsembleTopology,
    peer_port: int = DEFAULT_PEER_PORT,
    leader_port: int = DEFAULT_LEADER_PORT,
) -> List[str]:
    return [
        f"server.{member_id}={ip}:{peer_port}:{leader_port}"
        for member_id, ip in topology.members()
    ]
