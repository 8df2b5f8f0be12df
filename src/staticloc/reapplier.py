from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from .errors import FontLoadFailure
from .host import StyleSink, apply_section_style
from .models import FontName, Replacement

_logger = logging.getLogger(__name__)


def collect_fonts(replacements: Iterable[Replacement]) -> list[FontName]:
    fonts: list[FontName] = []
    for replacement in replacements:
        for font in [replacement.base_style.font_name, *(s.style.font_name for s in replacement.sections)]:
            if font not in fonts:
                fonts.append(font)
    return fonts


def load_fonts(fonts: Sequence[FontName], sink: StyleSink, *, concurrency: int = 4) -> None:
    if not fonts:
        return
    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as ex:
        futures = [(font, ex.submit(sink.load_font, font)) for font in fonts]
        for font, fut in futures:
            try:
                fut.result()
            except FontLoadFailure:
                raise
            except Exception as e:
                raise FontLoadFailure(font, str(e)) from e
    _logger.info("Fonts loaded: %s", ", ".join(f"{f.family} {f.style}" for f in fonts))


def replace_text(replacement: Replacement, sink: StyleSink) -> None:
    """Write the translation, then the base style, then each relocated section on top."""
    node = replacement.node
    translation = replacement.translation
    sink.set_characters(node, translation)
    if replacement.sections:
        apply_section_style(node, sink, 0, len(translation), replacement.base_style)
        for section in replacement.sections:
            apply_section_style(node, sink, section.start, section.end, section.style)


def apply_replacements(
    replacements: Sequence[Replacement],
    sink: StyleSink,
    *,
    concurrency: int = 4,
) -> int:
    """Staged commit: every font is acquired before the first node is touched."""
    load_fonts(collect_fonts(replacements), sink, concurrency=concurrency)
    for replacement in replacements:
        replace_text(replacement, sink)
    return len(replacements)
