# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/topology/zoo_cfg.py
from __future__ import annotations

import re
from typing import Optional, Sequence

from jinja2 import Environment, StrictUndefined

_SERVER_LINE = re.compile(r"^\s*server\.\d+\s*=")

# Base written when the package did not ship a zoo.cfg.
ZOO_CFG_TEMPLATE = """\
tickTime={{ tick_time }}
initLimit={{ init_limit }}
syncLimit={{ sync_limit }}
dataDir={{ data_dir }}
clientPort={{ client_port }}
"""

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)


def render_base(
    *,
    data_dir: str,
    client_port: int,
    tick_time: int = 2000,
    init_limit: int = 10,
    sync_limit: int = 5,
) -> str:
    return _env.from_string(ZOO_CFG_TEMPLATE).render(
        tick_time=tick_time,
        init_limit=init_limit,
        sync_limit=sync_limit,
        data_dir=data_dir,
        client_port=client_port,
    )


def merge_zoo_cfg(existing: Optional[str], server_lines: Sequence[str], *, base: str = "") -> str:
    """
    Replace every server.N line of a zoo.cfg with `server_lines`.

    Other settings are kept in their original order; the peer block goes
    last. Feeding the output back in with the same lines returns it
    unchanged.
    """
    text = existing if existing is not None else base
    kept = [line for line in text.splitlines() if not _SERVER_LINE.match(line)]
    while kept and not kept[-1].strip():
        kept.pop()
    return "\n".join([*kept, *server_lines]) + "\n"
