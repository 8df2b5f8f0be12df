from __future__ import annotations

import pytest

from staticloc.errors import InvalidPattern, ParseError
from staticloc.exception_patterns import keep_as_is, parse_exceptions


def test_parse_exceptions_skips_blank_lines():
    patterns = parse_exceptions("Joom\n\n^\\d+$\r\n   \n")
    assert [p.pattern for p in patterns] == ["Joom", "^\\d+$"]


def test_parse_exceptions_rejects_invalid_pattern():
    with pytest.raises(InvalidPattern) as exc:
        parse_exceptions("ok\n([a-z]\nnever reached")
    assert exc.value.pattern == "([a-z]"
    assert isinstance(exc.value, ParseError)


def test_keep_as_is_matches_anywhere_in_content():
    patterns = parse_exceptions("Joom\n^\\d+$")
    assert keep_as_is("Joom", patterns)
    assert keep_as_is("Shop on Joom today", patterns)
    assert keep_as_is("2024", patterns)
    assert not keep_as_is("2024 year", patterns)
    assert not keep_as_is("joom", patterns)


def test_keep_as_is_without_patterns_is_false():
    assert not keep_as_is("anything", [])
