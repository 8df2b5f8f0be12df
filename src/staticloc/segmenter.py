from __future__ import annotations

from .host import StyleSource, TextNode, section_style
from .models import MIXED, Section


def slice_into_sections(
    node: TextNode,
    source: StyleSource,
    start: int = 0,
    end: int | None = None,
) -> list[Section]:
    """Partition [start, end) into maximal style-uniform sections.

    Bisects until a range reports a uniform style, then fuses equal styles that meet at
    the split point. The result covers the range without gaps or overlaps and no two
    neighbours share a style.
    """
    if end is None:
        end = len(node.characters)
    if end <= start:
        return []

    style = section_style(node, source, start, end)
    if style is not MIXED:
        return [Section(start, end, style)]
    if end - start == 1:
        raise ValueError(f"style source reported a mixed style for a single character at {start}")

    center = (start + end) // 2
    left = slice_into_sections(node, source, start, center)
    right = slice_into_sections(node, source, center, end)
    if left[-1].style == right[0].style:
        right[0] = Section(left[-1].start, right[0].end, right[0].style)
        left.pop()
    return left + right
