from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Pattern

from .errors import InvalidPattern


def parse_exceptions(raw: str) -> list[Pattern[str]]:
    """Compile one regular expression per non-blank line."""
    patterns: list[Pattern[str]] = []
    for line in raw.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        try:
            patterns.append(re.compile(line))
        except re.error as e:
            raise InvalidPattern(line, str(e)) from e
    return patterns


def keep_as_is(content: str, patterns: Iterable[Pattern[str]]) -> bool:
    return any(pattern.search(content) for pattern in patterns)
