# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/logging/log.py

from __future__ import annotations

import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-7s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _drop_handlers(logger: logging.Logger) -> None:
    # a second run in the same process must not keep the previous log file open
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "mesonode",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Set up logging for one provisioning run.

    The file under `base_dir` receives everything, including each
    command's argv, output and exit status. The console (stderr) shows
    INFO and up, or the same trace as the file with `verbose`.

    Returns (logger, run_id, log_path); the run id is shared with the
    event observers so log lines and jsonl records can be joined.
    """
    run_id = str(uuid.uuid4())

    base_dir = Path(base_dir) if base_dir is not None else Path.home() / ".mesonode" / "logs"
    base_dir.mkdir(parents=True, exist_ok=True)

    started = datetime.now(timezone.utc)
    log_path = base_dir / f"{name}-{started:%Y%m%d-%H%M%S}-{run_id}.log"

    logger = logging.getLogger(name)
    _drop_handlers(logger)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    to_file = logging.FileHandler(log_path, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(to_file)

    to_console = logging.StreamHandler(sys.stderr)
    to_console.setLevel(logging.DEBUG if verbose else logging.INFO)
    to_console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(to_console)

    logger.debug("run %s started at %s", run_id, started.isoformat(timespec="seconds"))
    logger.debug("log file: %s", log_path)

    return logger, run_id, log_path
