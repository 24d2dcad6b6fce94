# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/execution/runner.py
from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from mesonode.errors import CommandFailed


@dataclass
class CommandRunner:
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("mesonode"))
    dry_run: bool = False
    label: Optional[str] = None
    timeout: int = 600

    def run(
        self,
        cmd: Sequence[str],
        *,
        check: bool = True,
        mutating: bool = True,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess:
        """
        Run a command, logging argv, output and exit status.

        `mutating=False` marks read-only queries (version listings,
        is-running probes); those still execute in dry-run mode.
        """
        label = self.label or "cmd"
        argv = [str(c) for c in cmd]
        cmd_str = " ".join(argv)

        self.logger.debug(f"[{label}] $ {cmd_str}")

        if self.dry_run and mutating:
            self.logger.info(f"[{label}] dry-run: {cmd_str}")
            return subprocess.CompletedProcess(args=argv, returncode=0, stdout="", stderr="")

        start = time.time()
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                check=False,
                text=True,
                env=env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise CommandFailed(argv, -1, f"timed out after {self.timeout}s") from None
        except FileNotFoundError as exc:
            raise CommandFailed(argv, 127, str(exc)) from None

        duration = time.time() - start

        if result.stdout:
            self.logger.debug(f"[{label}][stdout]\n{result.stdout.rstrip()}")
        if result.stderr:
            self.logger.debug(f"[{label}][stderr]\n{result.stderr.rstrip()}")
        self.logger.debug(f"[{label}][exit {result.returncode}] ({duration:.2f}s)")

        if check and result.returncode != 0:
            raise CommandFailed(argv, result.returncode, result.stderr or "")
        return result
