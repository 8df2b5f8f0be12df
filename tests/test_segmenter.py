from __future__ import annotations

import random

import pytest

from staticloc.models import MIXED, FontName, Style
from staticloc.segmenter import slice_into_sections
from staticloc.styled_text import StyledTextHost, StyledTextNode

REGULAR = Style()
BOLD = Style(font_name=FontName("Inter", "Bold"))
BIG = Style(font_size=24.0)


class _CountingHost(StyledTextHost):
    def __init__(self) -> None:
        super().__init__()
        self.queries: list[tuple[str, int, int]] = []

    def get_range_facet(self, node, facet, start, end):  # noqa: ANN001
        self.queries.append((facet, start, end))
        return super().get_range_facet(node, facet, start, end)


def _assert_partition(sections, length):
    assert sections[0].start == 0
    assert sections[-1].end == length
    for left, right in zip(sections, sections[1:]):
        assert left.end == right.start
        assert left.style != right.style
    assert all(s.start < s.end for s in sections)


def test_uniform_node_is_one_section():
    node = StyledTextNode("1:1", [("Привет!", REGULAR)])
    assert [(s.start, s.end, s.style) for s in slice_into_sections(node, StyledTextHost())] == [(0, 7, REGULAR)]


def test_sections_follow_runs():
    node = StyledTextNode("1:1", [("Hello ", REGULAR), ("world", BOLD)])
    sections = slice_into_sections(node, StyledTextHost())
    assert [(s.start, s.end, s.style) for s in sections] == [(0, 6, REGULAR), (6, 11, BOLD)]


def test_equal_styles_meeting_at_split_point_are_fused():
    # Midpoint of 0..8 is 4; the bold run straddles it.
    node = StyledTextNode("1:1", [("ab", REGULAR), ("cdef", BOLD), ("gh", REGULAR)])
    sections = slice_into_sections(node, StyledTextHost())
    assert [(s.start, s.end) for s in sections] == [(0, 2), (2, 6), (6, 8)]


def test_uniform_node_costs_one_query_per_facet():
    host = _CountingHost()
    slice_into_sections(StyledTextNode("1:1", [("uniform", REGULAR)]), host)
    assert len(host.queries) == 8
    assert host.queries[0] == ("fills", 0, 7)


def test_empty_node_has_no_sections():
    assert slice_into_sections(StyledTextNode("1:1"), StyledTextHost()) == []


def test_sub_range():
    node = StyledTextNode("1:1", [("Hello ", REGULAR), ("world", BOLD)])
    sections = slice_into_sections(node, StyledTextHost(), 3, 9)
    assert [(s.start, s.end) for s in sections] == [(3, 6), (6, 9)]


def test_source_reporting_mixed_single_character_is_an_error():
    class _Broken:
        def get_range_facet(self, node, facet, start, end):  # noqa: ANN001
            return MIXED

    with pytest.raises(ValueError):
        slice_into_sections(StyledTextNode("1:1", [("ab", REGULAR)]), _Broken())


@pytest.mark.parametrize("seed", range(20))
def test_random_runs_are_partitioned_maximally(seed):
    rng = random.Random(seed)
    runs = [
        ("x" * rng.randint(1, 5), rng.choice([REGULAR, BOLD, BIG]))
        for _ in range(rng.randint(1, 12))
    ]
    node = StyledTextNode("n", runs)
    sections = slice_into_sections(node, StyledTextHost())

    _assert_partition(sections, len(node.characters))
    for section in sections:
        assert {node.style_at(i) for i in range(section.start, section.end)} == {section.style}
    assert [(node.characters[s.start : s.end], s.style) for s in sections] == node.runs()
