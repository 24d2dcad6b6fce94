# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/system/distro.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from mesonode.errors import MalformedVersion, UnsupportedDistro
from mesonode.versioning.compare import parse_version, version_at_least

log = logging.getLogger("mesonode")

OS_RELEASE = Path("/etc/os-release")

# distro id -> (package family, first release that boots with systemd, init before that)
_DISTROS: Dict[str, tuple[str, str, str]] = {
    "ubuntu": ("apt", "15.04", "upstart"),
    "debian": ("apt", "8", "sysv"),
    "centos": ("yum", "7", "sysv"),
    "rhel": ("yum", "7", "sysv"),
    "redhat": ("yum", "7", "sysv"),
}


@dataclass(frozen=True)
class Distro:
    name: str
    version: str
    family: str       # "apt" | "yum"
    init: str         # "systemd" | "upstart" | "sysv"

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


def parse_distro(value: str) -> Distro:
    """
    Parse a "<name>-<version>" string such as "ubuntu-14.04" or "centos-7".
    """
    raw = (value or "").strip().lower()
    name, sep, version = raw.rpartition("-")
    if not sep or not name or not version:
        raise UnsupportedDistro(value)
    if name not in _DISTROS:
        raise UnsupportedDistro(value)
    try:
        parse_version(version)
    except MalformedVersion:
        raise UnsupportedDistro(value) from None

    family, systemd_since, legacy_init = _DISTROS[name]
    init = "systemd" if version_at_least(version, systemd_since) else legacy_init
    return Distro(name=name, version=version, family=family, init=init)


def read_os_release(path: Path = OS_RELEASE) -> Dict[str, str]:
    try:
        contents = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    data: Dict[str, str] = {}
    for line in contents.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key] = value.strip().strip('"')
    return data


def detect_distro(path: Path = OS_RELEASE) -> Distro:
    """Build the distro string from ID and VERSION_ID in os-release."""
    data = read_os_release(path)
    distro_id = data.get("ID", "").lower()
    version_id = data.get("VERSION_ID", "")
    if not distro_id or not version_id:
        raise UnsupportedDistro(f"unknown (no ID/VERSION_ID in {path})")
    log.debug("detected distro %s-%s from %s", distro_id, version_id, path)
    return parse_distro(f"{distro_id}-{version_id}")
