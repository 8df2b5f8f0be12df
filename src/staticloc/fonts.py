from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock

from .errors import FontLoadFailure
from .models import FontName

_logger = logging.getLogger(__name__)


class FontRegistry:
    """Tracks fonts made available for writing.

    Without `strict`, any font is accepted (the renderer resolves families later).
    An empty family means "inherited" and is always accepted.
    With `strict`, only families listed in `available` can be loaded.
    """

    def __init__(self, available: Iterable[str] = (), *, strict: bool = False) -> None:
        self.available = {family.strip().lower() for family in available if family.strip()}
        self.strict = strict
        self._loaded: set[FontName] = set()
        self._lock = Lock()

    def load(self, font: FontName) -> None:
        with self._lock:
            if font in self._loaded:
                return
            if self.strict and font.family and font.family.strip().lower() not in self.available:
                raise FontLoadFailure(font, f"family {font.family!r} is not available")
            self._loaded.add(font)
        _logger.debug("Font loaded: %s %s", font.family, font.style)

    def is_loaded(self, font: FontName) -> bool:
        with self._lock:
            return font in self._loaded
