# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/versioning/catalog.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from mesonode.errors import NoMatchingVersion

log = logging.getLogger("mesonode")

# Characters that may follow a requested prefix for an entry to count as a
# match. "-" separates the upstream version from the distro release.
VERSION_BOUNDARIES = (".", "-")


@dataclass(frozen=True)
class PackageRequest:
    name: str
    version: Optional[str] = None   # prefix, e.g. "0.28"; None means latest


@dataclass(frozen=True)
class ResolvedPackageVersion:
    name: str
    version: Optional[str]          # None -> backend installs latest
    requested: Optional[str] = None

    @property
    def is_latest(self) -> bool:
        return self.version is None


def matches_prefix(candidate: str, prefix: str) -> bool:
    if not candidate.startswith(prefix):
        return False
    rest = candidate[len(prefix):]
    return rest == "" or rest.startswith(VERSION_BOUNDARIES)


def matching_versions(prefix: str, available: Sequence[str]) -> List[str]:
    return [v for v in available if matches_prefix(v, prefix)]


def resolve(package: str, requested: Optional[str], available: Sequence[str]) -> ResolvedPackageVersion:
    """
    Resolve a requested version prefix to one concrete catalog entry.

    - No request -> latest sentinel, the listing is not consulted.
    - Several matches -> the last one in listing order wins. Backends list
      oldest to newest, so this is the newest release within the prefix.
    - No match -> NoMatchingVersion with the full listing attached.
    """
    if not requested:
        return ResolvedPackageVersion(name=package, version=None)

    prefix = requested.strip()
    candidates = matching_versions(prefix, available)
    if not candidates:
        raise NoMatchingVersion(package, prefix, available)

    chosen = candidates[-1]
    log.debug(
        "resolved %s %r -> %s (candidates: %s)", package, prefix, chosen, candidates
    )
    return ResolvedPackageVersion(name=package, version=chosen, requested=prefix)


def resolve_request(req: PackageRequest, available: Sequence[str]) -> ResolvedPackageVersion:
    return resolve(req.name, req.version, available)
