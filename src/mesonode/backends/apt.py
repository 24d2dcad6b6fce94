# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/backends/apt.py
from __future__ import annotations

import os
from typing import List

from .base import BaseBackend, dedupe


class AptBackend(BaseBackend):
    """
    Debian/Ubuntu. The mesos package depends on zookeeper, so the
    ensemble daemon lands on every host that gets mesos.
    """

    family = "apt"
    ensemble_bundled = True

    def _env(self) -> dict[str, str]:
        return {**os.environ, "DEBIAN_FRONTEND": "noninteractive"}

    def refresh_catalog(self) -> None:
        self.runner.run(["apt-get", "-y", "update"])

    def list_available_versions(self, package: str) -> List[str]:
        # madison prints "<pkg> | <version> | <source>", newest first
        cp = self.runner.run(["apt-cache", "madison", package], mutating=False)
        versions = []
        for line in (cp.stdout or "").splitlines():
            cols = [c.strip() for c in line.split("|")]
            if len(cols) >= 2 and cols[0] == package and cols[1]:
                versions.append(cols[1])
        return list(reversed(dedupe(versions)))

    def install_exact(self, package: str, version: str) -> None:
        self.runner.run(
            ["apt-get", "-y", "install", f"{package}={version}"], env=self._env()
        )

    def install_latest(self, package: str) -> None:
        self.runner.run(["apt-get", "-y", "install", package], env=self._env())
