from __future__ import annotations

import re

# Line feed, line separator, narrow no-break space, no-break space.
_SPACE_VARIANTS_RE = re.compile("[\u000a\u2028\u202f\u00a0]")
_SPACE_RUN_RE = re.compile(" +")


def normalize_content(text: str) -> str:
    """Collapse line breaks and space variants to single ASCII spaces.

    The same function builds mapping keys and lookup keys; the two must never diverge.
    Leading and trailing spaces are kept.
    """
    return _SPACE_RUN_RE.sub(" ", _SPACE_VARIANTS_RE.sub(" ", text))
