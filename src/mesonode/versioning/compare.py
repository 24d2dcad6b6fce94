# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/versioning/compare.py
from __future__ import annotations

import re
from enum import Enum
from itertools import zip_longest
from typing import Tuple

from mesonode.errors import MalformedVersion

_SEGMENT = re.compile(r"[0-9]+")


class Comparison(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def parse_version(text: str) -> Tuple[int, ...]:
    """
    Split a dotted version into integer segments.

    Every segment must be a non-empty run of decimal digits; anything
    else raises MalformedVersion instead of being coerced to 0.
    """
    if text is None:
        raise MalformedVersion(str(text))
    segments = []
    for part in text.strip().split("."):
        if not _SEGMENT.fullmatch(part):
            raise MalformedVersion(text)
        segments.append(int(part))
    return tuple(segments)


def compare(a: str, b: str) -> Comparison:
    """
    Compare two dotted versions numerically, segment by segment.

    The shorter version is zero-padded, so "1.2" equals "1.2.0" and
    "1.10" is greater than "1.9".
    """
    for x, y in zip_longest(parse_version(a), parse_version(b), fillvalue=0):
        if x > y:
            return Comparison.GREATER
        if x < y:
            return Comparison.LESS
    return Comparison.EQUAL


def version_at_least(version: str, minimum: str) -> bool:
    return compare(version, minimum) is not Comparison.LESS
