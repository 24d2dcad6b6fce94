# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/system/files.py
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

log = logging.getLogger("mesonode")


class AtomicFileWriter:
    """
    Whole-file replacement: content goes to a temp file in the target
    directory, then os.replace() swaps it in. A crash leaves either the
    old file or the new one, never half of each.
    """

    def __init__(self, *, dry_run: bool = False, mode: int = 0o644):
        self.dry_run = dry_run
        self.mode = mode

    def read(self, path: Path) -> Optional[str]:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, path: Path, content: str) -> bool:
        """Write `content`; returns False when the file already matched."""
        path = Path(path)
        if self.read(path) == content:
            log.debug("%s unchanged", path)
            return False

        if self.dry_run:
            log.info("dry-run: would write %s:\n%s", path, content.rstrip())
            return True

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, self.mode)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        log.debug("wrote %s", path)
        return True

    def remove(self, path: Path) -> bool:
        path = Path(path)
        if not path.exists():
            return False
        if self.dry_run:
            log.info("dry-run: would remove %s", path)
            return True
        path.unlink()
        return True
