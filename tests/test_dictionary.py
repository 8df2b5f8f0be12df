from __future__ import annotations

import pytest

from staticloc.dictionary import get_mapping, parse_dictionary
from staticloc.errors import MissingColumn, ParseError
from staticloc.models import Dictionary, ErrorKind


def test_parse_dictionary_header_and_rows():
    d = parse_dictionary("RU\tEN\nПривет!\tHello!\nМир\tWorld")
    assert d.header == ["RU", "EN"]
    assert d.rows == [["Привет!", "Hello!"], ["Мир", "World"]]


def test_parse_dictionary_trims_fields_and_handles_crlf_and_trailing_newline():
    d = parse_dictionary("RU \t EN\r\n  Да\tYes  \r\n")
    assert d.header == ["RU", "EN"]
    assert d.rows == [["Да", "Yes"]]


def test_parse_dictionary_keeps_percent_sequences_and_emoji_intact():
    d = parse_dictionary("RU\tEN\n100%09 скидка\t100%09 off\n🎉 Ура\t🎉 Hooray")
    assert d.rows == [["100%09 скидка", "100%09 off"], ["🎉 Ура", "🎉 Hooray"]]


def test_parse_dictionary_custom_delimiter():
    d = parse_dictionary("RU;EN\nДа;Yes", delimiter=";")
    assert d.rows == [["Да", "Yes"]]


@pytest.mark.parametrize("raw", ["", "RU\tEN", "RU\tEN\n", "RU\tEN\n\n"])
def test_parse_dictionary_requires_header_and_one_row(raw):
    with pytest.raises(ParseError) as exc:
        parse_dictionary(raw)
    assert exc.value.kind == ErrorKind.PARSE_ERROR


def test_parse_dictionary_rejects_misaligned_row():
    with pytest.raises(ParseError) as exc:
        parse_dictionary("RU\tEN\nДа\tYes\nНет")
    assert "row 3" in exc.value.message
    assert "1 (not 2)" in exc.value.message


def test_get_mapping_skips_empty_targets_and_last_row_wins():
    d = Dictionary(
        header=["RU", "EN", "DE"],
        rows=[
            ["Да", "Yes", "Ja"],
            ["Нет", "  ", "Nein"],
            ["Да", "Yep", ""],
        ],
    )
    assert get_mapping(d, "RU", "EN") == {"Да": "Yep"}
    assert get_mapping(d, "RU", "DE") == {"Да": "Ja", "Нет": "Nein"}


def test_get_mapping_normalizes_source_keys():
    d = parse_dictionary("RU\tEN\nДобрый день\tGood afternoon")
    assert get_mapping(d, "RU", "EN") == {"Добрый день": "Good afternoon"}


@pytest.mark.parametrize("source,target,missing", [("ru", "EN", "ru"), ("RU", "FR", "FR")])
def test_get_mapping_header_match_is_exact(source, target, missing):
    d = parse_dictionary("RU\tEN\nДа\tYes")
    with pytest.raises(MissingColumn) as exc:
        get_mapping(d, source, target)
    assert exc.value.code == missing
    assert exc.value.kind == ErrorKind.MISSING_COLUMN
    assert exc.value.message == f"{missing} not listed in [RU,EN]"
