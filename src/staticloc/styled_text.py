from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from typing import Any

from .fonts import FontRegistry
from .models import MIXED, FontName, Style


class StyledTextNode:
    """Text with one style per character.

    Hosts snapshot their document text into these nodes, so planning works on plain
    Python values and the document library is touched again only when writing back.
    """

    def __init__(
        self,
        node_id: str,
        runs: Iterable[tuple[str, Style]] = (),
        *,
        ref: Any = None,
    ) -> None:
        self.node_id = node_id
        self.ref = ref
        self.changed = False
        self._chars: list[str] = []
        self._styles: list[Style] = []
        for text, style in runs:
            self._chars.extend(text)
            self._styles.extend([style] * len(text))

    def __repr__(self) -> str:
        return f"StyledTextNode({self.node_id!r}, {self.characters!r})"

    @property
    def characters(self) -> str:
        return "".join(self._chars)

    def style_at(self, index: int) -> Style:
        return self._styles[index]

    def runs(self) -> list[tuple[str, Style]]:
        """Compact characters back into maximal (text, style) runs."""
        out: list[tuple[str, Style]] = []
        for ch, style in zip(self._chars, self._styles):
            if out and out[-1][1] == style:
                out[-1] = (out[-1][0] + ch, style)
            else:
                out.append((ch, style))
        return out

    def _check_range(self, start: int, end: int) -> None:
        if not 0 <= start < end <= len(self._chars):
            raise IndexError(f"range {start}-{end} outside of node {self.node_id} (length {len(self._chars)})")

    def get_range_facet(self, facet: str, start: int, end: int) -> Any:
        self._check_range(start, end)
        first = self._styles[start].facet(facet)
        for style in self._styles[start + 1 : end]:
            if style.facet(facet) != first:
                return MIXED
        return first

    def set_range_facet(self, facet: str, start: int, end: int, value: Any) -> None:
        self._check_range(start, end)
        for i in range(start, end):
            self._styles[i] = dataclasses.replace(self._styles[i], **{facet: value})
        self.changed = True

    def set_characters(self, text: str) -> None:
        # New text inherits the style of the first character, like typing over a selection.
        style = self._styles[0] if self._styles else Style()
        self._chars = list(text)
        self._styles = [style] * len(text)
        self.changed = True


class StyledTextHost:
    """StyleSource and StyleSink over StyledTextNode instances."""

    def __init__(self, fonts: FontRegistry | None = None) -> None:
        self.fonts = fonts or FontRegistry()

    def get_range_facet(self, node: StyledTextNode, facet: str, start: int, end: int) -> Any:
        return node.get_range_facet(facet, start, end)

    def set_range_facet(self, node: StyledTextNode, facet: str, start: int, end: int, value: Any) -> None:
        if facet == "font_name" and not self.fonts.is_loaded(value):
            raise RuntimeError(f"font {value} must be loaded before it is applied")
        node.set_range_facet(facet, start, end, value)

    def set_characters(self, node: StyledTextNode, text: str) -> None:
        node.set_characters(text)

    def load_font(self, font_name: FontName) -> None:
        self.fonts.load(font_name)
