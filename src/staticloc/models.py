from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple


class ErrorKind(str, Enum):
    PARSE_ERROR = "parse_error"
    MISSING_COLUMN = "missing_column"
    NO_TRANSLATION = "no_translation"
    CANNOT_DETERMINE_BASE_STYLE = "cannot_determine_base_style"
    FONT_LOAD_FAILURE = "font_load_failure"

    @property
    def reason(self) -> str:
        return _REASONS[self]


_REASONS = {
    ErrorKind.PARSE_ERROR: "malformed input",
    ErrorKind.MISSING_COLUMN: "language not listed in the dictionary",
    ErrorKind.NO_TRANSLATION: "no translation",
    ErrorKind.CANNOT_DETERMINE_BASE_STYLE: "cannot determine a base style",
    ErrorKind.FONT_LOAD_FAILURE: "font load failure",
}


class _Mixed:
    """Marker returned by a style source when a facet varies within the queried range."""

    _instance: _Mixed | None = None

    def __new__(cls) -> _Mixed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MIXED"


MIXED = _Mixed()


class FontName(NamedTuple):
    family: str
    style: str = "Regular"


class LetterSpacing(NamedTuple):
    value: float = 0.0
    unit: str = "PERCENT"  # 'PIXELS' | 'POINTS' | 'PERCENT'


class LineHeight(NamedTuple):
    value: float | None = None
    unit: str = "AUTO"  # 'AUTO' | 'PIXELS' | 'POINTS' | 'PERCENT'


@dataclass(frozen=True)
class Paint:
    color: str = "000000"  # hex without '#'
    opacity: float = 1.0
    type: str = "SOLID"


# Canonical facet order. Style identity is the tuple of these values in this order.
FACETS: tuple[str, ...] = (
    "fills",
    "fill_style_id",
    "font_name",
    "font_size",
    "letter_spacing",
    "line_height",
    "text_decoration",
    "text_style_id",
)


@dataclass(frozen=True)
class Style:
    """Full set of character facets that a text node can vary per range."""

    fills: tuple[Paint, ...] = (Paint(),)
    fill_style_id: str = ""
    font_name: FontName = FontName("Inter")
    font_size: float = 12.0
    letter_spacing: LetterSpacing = LetterSpacing()
    line_height: LineHeight = LineHeight()
    text_decoration: str = "NONE"  # 'NONE' | 'UNDERLINE' | 'STRIKETHROUGH'
    text_style_id: str = ""

    def facet(self, name: str) -> Any:
        if name not in FACETS:
            raise KeyError(name)
        return getattr(self, name)

    @classmethod
    def from_facets(cls, values: dict[str, Any]) -> Style:
        unknown = set(values) - set(FACETS)
        if unknown:
            raise KeyError(f"Unknown style facets: {sorted(unknown)}")
        return cls(**values)


@dataclass(frozen=True)
class Section:
    """Half-open character range [start, end) sharing one style."""

    start: int
    end: int
    style: Style

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass
class Dictionary:
    header: list[str]
    rows: list[list[str]]


Mapping = dict[str, str]


@dataclass
class Replacement:
    node: Any
    translation: str
    base_style: Style
    sections: list[Section] = field(default_factory=list)


@dataclass
class ReplacementFailure:
    node: Any
    kind: ErrorKind
    log: list[str] = field(default_factory=list)

    @property
    def node_id(self) -> str:
        return str(getattr(self.node, "node_id", self.node))
