"""Capabilities consumed from the document host.

The core never talks to a document library directly. A host provides style reads
(`StyleSource`), content/style writes plus font acquisition (`StyleSink`), and the list
of selected text nodes.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import FACETS, MIXED, FontName, Style


class TextNode(Protocol):
    node_id: str

    @property
    def characters(self) -> str: ...


class StyleSource(Protocol):
    def get_range_facet(self, node: Any, facet: str, start: int, end: int) -> Any:
        """Return the facet value shared by [start, end), or MIXED."""
        ...


class StyleSink(Protocol):
    def set_characters(self, node: Any, text: str) -> None: ...

    def set_range_facet(self, node: Any, facet: str, start: int, end: int, value: Any) -> None: ...

    def load_font(self, font_name: FontName) -> None:
        """Make the font usable; must succeed before any facet referencing it is set."""
        ...


def section_style(node: Any, source: StyleSource, start: int, end: int) -> Style | Any:
    values: dict[str, Any] = {}
    for facet in FACETS:
        value = source.get_range_facet(node, facet, start, end)
        if value is MIXED:
            return MIXED
        values[facet] = value
    return Style.from_facets(values)


def apply_section_style(node: Any, sink: StyleSink, start: int, end: int, style: Style) -> None:
    for facet in FACETS:
        sink.set_range_facet(node, facet, start, end, style.facet(facet))
