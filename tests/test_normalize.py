from __future__ import annotations

import pytest

from staticloc.normalize import normalize_content


@pytest.mark.parametrize("sep", ["\n", "\u2028", "\u202f", "\u00a0", "  ", " \n\u00a0 "])
def test_normalize_collapses_space_variants(sep):
    assert normalize_content(f"Hello{sep}world") == "Hello world"


def test_normalize_keeps_edges_and_other_whitespace():
    assert normalize_content("  Hi  ") == " Hi "
    assert normalize_content("a\tb") == "a\tb"
    assert normalize_content("a\r\nb") == "a\r b"
