# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/topology/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class EnsembleTopology:
    """
    Ordered ZooKeeper peers, exactly as supplied on --masters.

    Position decides the member id (first peer is server.1), so the same
    --masters list on every master yields the same numbering everywhere.
    """
    peers: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.peers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.peers)

    @property
    def is_single_node(self) -> bool:
        return not self.peers

    def members(self) -> Iterator[Tuple[int, str]]:
        """Yield (member_id, ip) in topology order."""
        for idx, ip in enumerate(self.peers, start=1):
            yield idx, ip


@dataclass(frozen=True)
class NodeIdentity:
    ip: Optional[str] = None
    hostname: Optional[str] = None
