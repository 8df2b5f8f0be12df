"""JSON design documents.

A document is a tree of nodes::

    {"id": "1:2", "type": "FRAME", "name": "Card", "children": [
        {"id": "1:3", "type": "TEXT", "runs": [
            {"text": "Hello ", "style": {"fontName": {"family": "Inter", "style": "Regular"}}},
            {"text": "world", "style": {"fontName": {"family": "Inter", "style": "Bold"}}}
        ]}
    ]}

Style keys are camelCase; missing keys fall back to `Style` defaults.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from itertools import count
from pathlib import Path
from typing import Any

from .models import FontName, LetterSpacing, LineHeight, Paint, Style
from .styled_text import StyledTextNode

_DEFAULT = Style()


def style_from_json(data: dict[str, Any] | None) -> Style:
    data = data or {}
    fills = data.get("fills")
    font = data.get("fontName") or {}
    spacing = data.get("letterSpacing") or {}
    line_height = data.get("lineHeight") or {}
    return Style(
        fills=(
            tuple(
                Paint(
                    color=str(p.get("color", "000000")).lstrip("#").upper(),
                    opacity=float(p.get("opacity", 1.0)),
                    type=str(p.get("type", "SOLID")),
                )
                for p in fills
            )
            if fills is not None
            else _DEFAULT.fills
        ),
        fill_style_id=str(data.get("fillStyleId", "")),
        font_name=FontName(
            str(font.get("family", _DEFAULT.font_name.family)),
            str(font.get("style", _DEFAULT.font_name.style)),
        ),
        font_size=float(data.get("fontSize", _DEFAULT.font_size)),
        letter_spacing=LetterSpacing(
            float(spacing.get("value", 0.0)),
            str(spacing.get("unit", "PERCENT")),
        ),
        line_height=LineHeight(
            float(line_height["value"]) if line_height.get("value") is not None else None,
            str(line_height.get("unit", "AUTO")),
        ),
        text_decoration=str(data.get("textDecoration", "NONE")),
        text_style_id=str(data.get("textStyleId", "")),
    )


def style_to_json(style: Style) -> dict[str, Any]:
    line_height: dict[str, Any] = {"unit": style.line_height.unit}
    if style.line_height.value is not None:
        line_height["value"] = style.line_height.value
    return {
        "fills": [{"type": p.type, "color": p.color, "opacity": p.opacity} for p in style.fills],
        "fillStyleId": style.fill_style_id,
        "fontName": {"family": style.font_name.family, "style": style.font_name.style},
        "fontSize": style.font_size,
        "letterSpacing": {"value": style.letter_spacing.value, "unit": style.letter_spacing.unit},
        "lineHeight": line_height,
        "textDecoration": style.text_decoration,
        "textStyleId": style.text_style_id,
    }


class JsonDocument:
    def __init__(self, root: dict[str, Any]) -> None:
        self.root = root
        self._by_id: dict[str, dict[str, Any]] = {}
        self._text_under: dict[str, list[str]] = {}
        self.text_nodes: dict[str, StyledTextNode] = {}
        # Nodes without an id get a positional one here; the tree itself is not touched.
        self._root_id = self._index(root, count())[0]

    def _index(self, raw: dict[str, Any], counter: Iterator[int]) -> tuple[str, list[str]]:
        index = next(counter)
        node_id = str(raw["id"]) if "id" in raw else f"auto:{index}"
        if node_id in self._by_id:
            raise ValueError(f"Duplicate node id {node_id!r}")
        self._by_id[node_id] = raw

        under: list[str] = []
        if raw.get("type") == "TEXT":
            runs = [(str(r.get("text", "")), style_from_json(r.get("style"))) for r in raw.get("runs", []) or []]
            self.text_nodes[node_id] = StyledTextNode(node_id, runs, ref=raw)
            under.append(node_id)
        for child in raw.get("children", []) or []:
            under.extend(self._index(child, counter)[1])
        self._text_under[node_id] = under
        return node_id, under

    def find_text_nodes(self, selection: Sequence[str] = ()) -> list[StyledTextNode]:
        """Text nodes under the selected node ids (whole document when empty), in tree order."""
        roots = list(selection) or [self._root_id]
        for node_id in roots:
            if node_id not in self._by_id:
                raise KeyError(f"Node {node_id!r} not found in document")

        found: list[StyledTextNode] = []
        seen: set[str] = set()
        for root_id in roots:
            for node_id in self._text_under[root_id]:
                if node_id not in seen:
                    seen.add(node_id)
                    found.append(self.text_nodes[node_id])
        return found

    def commit(self) -> int:
        """Write runs of changed text nodes back into the JSON tree."""
        written = 0
        for node in self.text_nodes.values():
            if not node.changed:
                continue
            node.ref["runs"] = [{"text": text, "style": style_to_json(style)} for text, style in node.runs()]
            node.changed = False
            written += 1
        return written


def load_json_document(path: Path) -> JsonDocument:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object as the document root")
    return JsonDocument(data)


def save_json_document(document: JsonDocument, path: Path) -> None:
    document.commit()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document.root, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
