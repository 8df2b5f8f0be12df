from __future__ import annotations

import pytest

from staticloc.models import MIXED, FontName, Style
from staticloc.styled_text import StyledTextNode

A = Style()
B = Style(font_size=20.0)


def test_get_range_facet_reports_mixed_only_for_varying_facets():
    node = StyledTextNode("n", [("ab", A), ("cd", B)])
    assert node.get_range_facet("font_size", 0, 2) == 12.0
    assert node.get_range_facet("font_size", 1, 3) is MIXED
    assert node.get_range_facet("font_name", 0, 4) == FontName("Inter")


def test_set_range_facet_and_runs():
    node = StyledTextNode("n", [("abcd", A)])
    node.set_range_facet("font_size", 1, 3, 20.0)
    assert node.runs() == [("a", A), ("bc", B), ("d", A)]


def test_set_characters_inherits_first_style():
    node = StyledTextNode("n", [("ab", B), ("cd", A)])
    node.set_characters("xyz")
    assert node.runs() == [("xyz", B)]


def test_out_of_range_queries_fail():
    node = StyledTextNode("n", [("ab", A)])
    with pytest.raises(IndexError):
        node.get_range_facet("fills", 1, 3)
    with pytest.raises(IndexError):
        node.get_range_facet("fills", 1, 1)
