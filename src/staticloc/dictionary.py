from __future__ import annotations

import logging
from urllib.parse import quote, unquote

from .errors import MissingColumn, ParseError
from .models import Dictionary, Mapping
from .normalize import normalize_content

_logger = logging.getLogger(__name__)

_ESCAPED_NEWLINE = quote("\n", safe="")


def _split_table(raw: str, delimiter: str) -> list[list[str]]:
    # Split on escaped separators so that no multi-byte payload is ever cut in half.
    escaped_delimiter = quote(delimiter, safe="")
    escaped = quote(raw, safe="")
    return [
        [unquote(field).strip() for field in line.split(escaped_delimiter)]
        for line in escaped.split(_ESCAPED_NEWLINE)
    ]


def parse_dictionary(raw: str, delimiter: str = "\t") -> Dictionary:
    """Parse tabular dictionary text: a header of language codes, then aligned rows."""
    if not delimiter:
        raise ParseError("empty dictionary delimiter")
    table = _split_table(raw, delimiter)
    while table and table[-1] == [""]:
        table.pop()
    if len(table) < 2:
        raise ParseError("empty dictionary")

    header = table[0]
    rows = table[1:]
    expected = len(header)
    for index, row in enumerate(rows):
        if len(row) != expected:
            raise ParseError(
                f"row {index + 2} of the dictionary has {len(row)} (not {expected}) columns"
            )
    _logger.debug("Dictionary header=%s rows=%d", header, len(rows))
    return Dictionary(header=header, rows=rows)


def _column_index(dictionary: Dictionary, code: str) -> int:
    try:
        return dictionary.header.index(code)
    except ValueError:
        raise MissingColumn(code, dictionary.header) from None


def get_mapping(dictionary: Dictionary, source_code: str, target_code: str) -> Mapping:
    """Build normalized source -> target lookup from two header columns.

    Rows with an empty target are left out; for repeated sources the last row wins.
    """
    source_index = _column_index(dictionary, source_code)
    target_index = _column_index(dictionary, target_code)
    mapping: Mapping = {}
    for row in dictionary.rows:
        target = row[target_index]
        if target.strip() == "":
            continue
        mapping[normalize_content(row[source_index])] = target
    _logger.debug("Extracted mapping %s -> %s: %d entries", source_code, target_code, len(mapping))
    return mapping
