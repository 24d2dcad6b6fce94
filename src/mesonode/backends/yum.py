# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/backends/yum.py
from __future__ import annotations

from typing import List

from .base import BaseBackend, dedupe


class YumBackend(BaseBackend):
    """RHEL/CentOS. ZooKeeper is a separate package (mesosphere-zookeeper)."""

    family = "yum"
    ensemble_bundled = False

    def refresh_catalog(self) -> None:
        self.runner.run(["yum", "-q", "-y", "makecache"])

    def list_available_versions(self, package: str) -> List[str]:
        # "<pkg>.<arch>   <version>   <repo>", oldest first
        cp = self.runner.run(
            ["yum", "-q", "--showduplicates", "list", "available", package],
            check=False,
            mutating=False,
        )
        versions = []
        for line in (cp.stdout or "").splitlines():
            cols = line.split()
            if len(cols) >= 2 and cols[0].rsplit(".", 1)[0] == package:
                versions.append(cols[1])
        return dedupe(versions)

    def install_exact(self, package: str, version: str) -> None:
        self.runner.run(["yum", "-y", "install", f"{package}-{version}"])

    def install_latest(self, package: str) -> None:
        self.runner.run(["yum", "-y", "install", package])
