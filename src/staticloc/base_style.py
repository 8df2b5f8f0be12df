"""Base style selection for a translated text node.

Translation moves and resizes words, so original offsets are useless in the translated
string. One of the node's styles is chosen to cover the whole translation ("base
style"); every run with another style must then be found again inside the translation.
Its translated form has to occur exactly once, otherwise the position is unknown and the
candidate is abandoned in favour of the next style.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Pattern

from .exception_patterns import keep_as_is
from .models import Mapping, Section, Style
from .normalize import normalize_content

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseStyleChoice:
    base_style: Style
    sections: list[Section]


def style_candidates(sections: Sequence[Section]) -> list[Section]:
    """First section of each distinct style, in order of first appearance."""
    seen: set[Style] = set()
    candidates: list[Section] = []
    for section in sections:
        if section.style in seen:
            continue
        seen.add(section.style)
        candidates.append(section)
    return candidates


def locate_unique(needle: str, haystack: str) -> tuple[int, int]:
    """Return (index, occurrences) where occurrences is 0, 1 or 2 (meaning "two or more").

    Overlapping occurrences count, so "aa" is ambiguous inside "aaa".
    """
    index = haystack.find(needle)
    if index == -1:
        return -1, 0
    if haystack.find(needle, index + 1) != -1:
        return index, 2
    return index, 1


def _relocate(
    content: str,
    sections: Sequence[Section],
    candidate: Style,
    translation: str,
    mapping: Mapping,
    patterns: Sequence[Pattern[str]],
    log: list[str],
) -> list[Section] | None:
    relocated: list[Section] = []
    for section in sections:
        original = content[section.start : section.end]
        if section.style == candidate:
            log.append(f"Section `{original}` has the base style: ignored")
            continue

        fragment = normalize_content(original)
        log.append(f"Section `{fragment}` has a non-base style: needs translation")
        if fragment in mapping:
            fragment_translation = mapping[fragment]
        elif keep_as_is(fragment, patterns):
            fragment_translation = fragment
        else:
            log.append("No translation found: skipping the candidate")
            return None

        index, occurrences = locate_unique(fragment_translation, translation)
        if occurrences == 0:
            log.append(
                f"Cannot find `{fragment_translation}` within `{translation}`: skipping the candidate"
            )
            return None
        if occurrences > 1:
            log.append(
                f"Found multiple occurrences of `{fragment_translation}` within `{translation}`: "
                "skipping the candidate"
            )
            return None

        log.append("Section translated")
        relocated.append(Section(index, index + len(fragment_translation), section.style))
    return relocated


def select_base_style(
    content: str,
    sections: Sequence[Section],
    translation: str,
    mapping: Mapping,
    patterns: Sequence[Pattern[str]],
    log: list[str],
) -> BaseStyleChoice | None:
    """Try each distinct style as the base; the first full, unambiguous relocation wins.

    `content` is the node's original text (sections index into it). Every decision is
    appended to `log`. Returns None when no candidate works.
    """
    for candidate in style_candidates(sections):
        log.append(f"Base style candidate: {candidate.label}")
        relocated = _relocate(content, sections, candidate.style, translation, mapping, patterns, log)
        if relocated is not None:
            _logger.debug("Base style %s chosen, %d relocated sections", candidate.label, len(relocated))
            return BaseStyleChoice(base_style=candidate.style, sections=relocated)
    return None
